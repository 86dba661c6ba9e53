"""Tests for the filter registry."""

from __future__ import annotations

import logging
import threading

import pytest

from filter_stash.hooks import DEFAULT_PRIORITY, LATE_PRIORITY
from filter_stash.hooks.registry import (
    FilterRegistry,
    get_filter_registry,
    reset_filter_registry,
)


# =============================================================================
# Priority constants
# =============================================================================


class TestPriorities:
    def test_late_priority_runs_after_default(self):
        assert LATE_PRIORITY > DEFAULT_PRIORITY


# =============================================================================
# FilterRegistry
# =============================================================================


class TestFilterRegistry:
    def test_apply_threads_value_through_callbacks(self):
        registry = FilterRegistry()
        registry.add_filter("title", lambda v: v + " world")
        registry.add_filter("title", lambda v: v.upper())

        assert registry.apply_filters("title", "hello") == "HELLO WORLD"

    def test_extra_args_passed_to_callbacks(self):
        registry = FilterRegistry()
        seen = []

        def record(value, post_id, context):
            seen.append((value, post_id, context))
            return value

        registry.add_filter("title", record)
        registry.apply_filters("title", "hi", 42, "view")
        assert seen == [("hi", 42, "view")]

    def test_priority_order(self):
        registry = FilterRegistry()
        results = []

        def make(tag):
            def hook(value):
                results.append(tag)
                return value
            return hook

        registry.add_filter("h", make("late"), LATE_PRIORITY)
        registry.add_filter("h", make("early"), 1)
        registry.add_filter("h", make("default-a"))
        registry.add_filter("h", make("default-b"))

        registry.apply_filters("h", None)
        assert results == ["early", "default-a", "default-b", "late"]

    def test_error_isolation(self, caplog):
        """A failing filter should not prevent subsequent filters from running."""
        registry = FilterRegistry()

        def bad(value):
            raise ValueError("boom")

        registry.add_filter("h", lambda v: v + 1)
        registry.add_filter("h", bad)
        registry.add_filter("h", lambda v: v * 10)

        with caplog.at_level(logging.ERROR, logger="filter-stash.hooks"):
            assert registry.apply_filters("h", 1) == 20
        assert "failed on h" in caplog.text

    def test_no_filters_returns_value(self):
        registry = FilterRegistry()
        value = object()
        assert registry.apply_filters("nothing", value) is value

    def test_filters_only_run_for_matching_hook(self):
        registry = FilterRegistry()
        registry.add_filter("a", lambda v: "a")
        registry.add_filter("b", lambda v: "b")
        assert registry.apply_filters("a", None) == "a"

    def test_remove_filter(self):
        registry = FilterRegistry()

        def double(v):
            return v * 2

        registry.add_filter("h", double)
        assert registry.has_filter("h", double)
        assert registry.remove_filter("h", double) is True
        assert not registry.has_filter("h")
        assert registry.apply_filters("h", 3) == 3

    def test_remove_filter_priority_must_match(self):
        registry = FilterRegistry()

        def noop(v):
            return v

        registry.add_filter("h", noop, 5)
        assert registry.remove_filter("h", noop, 6) is False
        assert registry.remove_filter("h", noop, 5) is True

    def test_remove_unknown_filter(self):
        registry = FilterRegistry()
        assert registry.remove_filter("h", lambda v: v) is False

    def test_list_filters(self):
        registry = FilterRegistry()

        def first(v):
            return v

        def second(v):
            return v

        registry.add_filter("a", second, 20)
        registry.add_filter("a", first, 1)
        registry.add_filter("b", first)

        assert registry.list_filters("a") == [first.__qualname__, second.__qualname__]
        all_filters = registry.list_filters()
        assert f"b:{first.__qualname__}" in all_filters
        assert len(all_filters) == 3

    def test_concurrent_add_filter(self):
        registry = FilterRegistry()
        barrier = threading.Barrier(8)

        def add(i):
            barrier.wait()
            for j in range(50):
                registry.add_filter("h", lambda v: v + 1, j % 5)

        threads = [threading.Thread(target=add, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry.list_filters("h")) == 400
        assert registry.apply_filters("h", 0) == 400


class TestSingleton:
    @pytest.fixture(autouse=True)
    def fresh_registry(self):
        reset_filter_registry()

    def test_get_returns_same_instance(self):
        assert get_filter_registry() is get_filter_registry()

    def test_reset_replaces_instance(self):
        old = get_filter_registry()
        old.add_filter("h", lambda v: v)
        new = reset_filter_registry()
        assert new is not old
        assert get_filter_registry() is new
        assert not new.has_filter("h")
