"""Filter hook system for filter-stash.

Provides a priority-ordered filter model: each callback receives the
current value plus any extra hook arguments and returns the (possibly
modified) value for the next callback. Callbacks execute sequentially
with error isolation; one callback failure doesn't break the chain.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

DEFAULT_PRIORITY = 10  # Ordinary filters
LATE_PRIORITY = 99999  # Observers that must see the final value

# Type alias for filter callbacks: (value, *args) -> value
FilterFn = Callable[..., Any]


class FilterDispatcher(Protocol):
    """Anything a :class:`~filter_stash.stasher.Stasher` can subscribe to."""

    def add_filter(
        self, hook: str, callback: FilterFn, priority: int = DEFAULT_PRIORITY
    ) -> None: ...

    def remove_filter(
        self, hook: str, callback: FilterFn, priority: int | None = None
    ) -> bool: ...
