"""
Capture store for filter hook arguments.

A :class:`Stasher` subscribes a late-running observer to each hook it is
told to stash. Every firing is checked against the hook's
:class:`~filter_stash.rules.CaptureRule` and, if accepted, replaces the
hook's snapshot. Other code reads the snapshots back by hook name.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from .hooks import LATE_PRIORITY, FilterDispatcher
from .rules import CaptureMode, CaptureRule, FieldKey
from .snapshot import Snapshot, build_snapshot, has_nonempty_value, missing_required

logger = logging.getLogger("filter-stash.store")


class _CaptureHandler:
    """Filter callback bound to one store and one rule."""

    def __init__(self, stasher: Stasher, rule: CaptureRule) -> None:
        self.stasher = stasher
        self.rule = rule

    def __call__(self, *args: Any) -> Any:
        self.stasher._capture(self.rule, args)
        # Filters must hand the value on untouched
        return args[0] if args else None

    def __repr__(self) -> str:
        return f"stash[{self.rule.hook}]"


class Stasher:
    """In-memory store of the last accepted snapshot per hook.

    Pass the dispatcher the store should subscribe to; by default the
    global :class:`~filter_stash.hooks.registry.FilterRegistry` is used.
    """

    def __init__(self, dispatcher: FilterDispatcher | None = None) -> None:
        if dispatcher is None:
            from .hooks.registry import get_filter_registry

            dispatcher = get_filter_registry()
        self.dispatcher = dispatcher
        self._stashed: dict[str, Snapshot] = {}
        self._handlers: dict[str, _CaptureHandler] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        hook: str,
        field_names: Iterable[str] = (),
        mode: CaptureMode | str = CaptureMode.ALWAYS,
        required: Iterable[FieldKey] = (),
    ) -> CaptureRule:
        """Start stashing the arguments ``hook`` fires with.

        Args:
            hook: Filter hook name.
            field_names: Names for the arguments, in order. Empty keys them
                by position instead.
            mode: ``always``, ``first`` or ``empty`` (until non-empty).
            required: Names (or indices, in positional mode) that must be
                non-empty for a firing to be captured.

        Returns:
            The validated rule.

        Raises:
            InvalidCaptureRule: If the configuration is inconsistent.
        """
        rule = CaptureRule(
            hook=hook,
            field_names=tuple(field_names),
            mode=mode,  # type: ignore[arg-type]  # coerced in __post_init__
            required=tuple(required),
        )
        handler = _CaptureHandler(self, rule)
        with self._lock:
            # A hook has one rule; re-registering replaces it
            previous = self._handlers.pop(hook, None)
            if previous is not None:
                self.dispatcher.remove_filter(hook, previous, LATE_PRIORITY)
            self._handlers[hook] = handler
            self.dispatcher.add_filter(hook, handler, LATE_PRIORITY)
        logger.debug("Stashing %s (mode=%s)", hook, rule.mode.value)
        return rule

    stash = register

    def unregister(self, hook: str) -> bool:
        """Stop stashing ``hook``. Already stored values are kept."""
        with self._lock:
            handler = self._handlers.pop(hook, None)
        if handler is None:
            return False
        return self.dispatcher.remove_filter(hook, handler, LATE_PRIORITY)

    def rules(self) -> dict[str, CaptureRule]:
        """Return the active rules keyed by hook name."""
        with self._lock:
            return {hook: h.rule for hook, h in self._handlers.items()}

    def _capture(self, rule: CaptureRule, args: tuple[Any, ...]) -> None:
        with self._lock:
            current = self._stashed.get(rule.hook)
            if rule.mode is CaptureMode.FIRST and current:
                return
            if rule.mode is CaptureMode.UNTIL_NONEMPTY and has_nonempty_value(current):
                return

            candidate = build_snapshot(rule, args)
            missing = missing_required(rule, candidate)
            if missing is not None:
                logger.debug("Skipped %s: required field %r is empty", rule.hook, missing)
                return

            self._stashed[rule.hook] = candidate

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, hook: str, field: FieldKey | None = None) -> Any:
        """Return the snapshot for ``hook``, or one field of it.

        Returns None when nothing was stashed or the field does not exist.
        """
        with self._lock:
            snapshot = self._stashed.get(hook)
        if snapshot is None:
            return None
        if field is not None:
            return snapshot.get(field)
        return snapshot

    def get_all(self) -> dict[str, Snapshot]:
        """Return every stored snapshot, in capture order."""
        with self._lock:
            return dict(self._stashed)

    def list(self) -> list[str]:
        """Return the hook names that have stored snapshots."""
        with self._lock:
            return [*self._stashed]

    def has(self, hook: str) -> bool:
        """True if a non-empty snapshot is stored for ``hook``."""
        with self._lock:
            return bool(self._stashed.get(hook))

    def clear(self, hook: str | None = None) -> None:
        """Drop one hook's snapshot, or all of them when no hook is given."""
        with self._lock:
            if not hook:
                self._stashed.clear()
            else:
                self._stashed.pop(hook, None)

    def __contains__(self, hook: object) -> bool:
        return isinstance(hook, str) and self.has(hook)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stashed)
