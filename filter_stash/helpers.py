"""Module-level shortcuts bound to a default :class:`Stasher`."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .rules import CaptureMode, CaptureRule, FieldKey
from .snapshot import Snapshot
from .stasher import Stasher

# Module-level singleton, created on first use
_stasher: Stasher | None = None


def get_stasher() -> Stasher:
    """Return the default store, bound to the global filter registry."""
    global _stasher
    if _stasher is None:
        _stasher = Stasher()
    return _stasher


def reset_stasher(stasher: Stasher | None = None) -> Stasher:
    """Replace the default store (for testing). Returns the new store."""
    global _stasher
    _stasher = stasher if stasher is not None else Stasher()
    return _stasher


def stash_filter(
    hook: str,
    field_names: Iterable[str] = (),
    mode: CaptureMode | str = CaptureMode.ALWAYS,
    required: Iterable[FieldKey] = (),
) -> CaptureRule:
    return get_stasher().register(hook, field_names, mode, required)


def get_stashed(hook: str, field: FieldKey | None = None) -> Any:
    return get_stasher().get(hook, field)


def has_stashed(hook: str) -> bool:
    return get_stasher().has(hook)


def clear_stashed(hook: str | None = None) -> None:
    get_stasher().clear(hook)


def get_all_stashed() -> dict[str, Snapshot]:
    return get_stasher().get_all()


def list_stashed() -> list[str]:
    return get_stasher().list()
