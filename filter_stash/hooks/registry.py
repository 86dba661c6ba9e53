"""Filter registry with priority ordering and error isolation."""

from __future__ import annotations

import logging
import threading
from typing import Any

from . import DEFAULT_PRIORITY, FilterFn

logger = logging.getLogger("filter-stash.hooks")


def _callback_name(callback: FilterFn) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)


class FilterRegistry:
    """Run filter callbacks for a named hook in priority order.

    Lower priorities run first; callbacks sharing a priority run in the
    order they were added. If a callback raises, the error is logged and
    the chain continues with the value it was given.

    Subscriptions may change from any thread; callbacks run outside the
    registry lock against a copy of the subscription list.
    """

    def __init__(self) -> None:
        self._filters: dict[str, list[tuple[int, FilterFn]]] = {}
        self._lock = threading.Lock()

    def add_filter(
        self, hook: str, callback: FilterFn, priority: int = DEFAULT_PRIORITY
    ) -> None:
        """Subscribe ``callback`` to ``hook``."""
        with self._lock:
            callbacks = self._filters.setdefault(hook, [])
            callbacks.append((priority, callback))
            # Stable sort keeps registration order within a priority
            callbacks.sort(key=lambda entry: entry[0])
        logger.debug(
            "Registered filter: %s for %s at %d",
            _callback_name(callback),
            hook,
            priority,
        )

    def remove_filter(
        self, hook: str, callback: FilterFn, priority: int | None = None
    ) -> bool:
        """Remove the first matching subscription. Returns whether one was removed."""
        with self._lock:
            callbacks = self._filters.get(hook, [])
            for i, (prio, fn) in enumerate(callbacks):
                if fn == callback and (priority is None or prio == priority):
                    del callbacks[i]
                    if not callbacks:
                        del self._filters[hook]
                    break
            else:
                return False
        logger.debug("Removed filter: %s from %s", _callback_name(fn), hook)
        return True

    def has_filter(self, hook: str, callback: FilterFn | None = None) -> bool:
        """Return True if ``hook`` has any callback, or the given one."""
        with self._lock:
            callbacks = list(self._filters.get(hook, []))
        if callback is None:
            return bool(callbacks)
        return any(fn == callback for _, fn in callbacks)

    def apply_filters(self, hook: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every callback registered for ``hook``."""
        # Copy so callbacks may add/remove filters while running
        with self._lock:
            callbacks = list(self._filters.get(hook, []))
        for _, callback in callbacks:
            try:
                value = callback(value, *args)
            except Exception:
                logger.error(
                    "Filter %s failed on %s", _callback_name(callback), hook, exc_info=True
                )
                # Continue chain, one filter failure doesn't break others
        return value

    def list_filters(self, hook: str | None = None) -> list[str]:
        """Return callback names in run order, optionally for one hook."""
        with self._lock:
            filters = {name: list(callbacks) for name, callbacks in self._filters.items()}
        if hook is not None:
            return [_callback_name(fn) for _, fn in filters.get(hook, [])]
        return [
            f"{name}:{_callback_name(fn)}"
            for name, callbacks in filters.items()
            for _, fn in callbacks
        ]


# Module-level singleton
_registry = FilterRegistry()


def get_filter_registry() -> FilterRegistry:
    """Return the global filter registry singleton."""
    return _registry


def reset_filter_registry() -> FilterRegistry:
    """Reset the global filter registry (for testing). Returns the new registry."""
    global _registry
    _registry = FilterRegistry()
    return _registry
