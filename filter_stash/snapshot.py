"""Captured snapshots of a single hook firing."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Union

from .rules import CaptureRule, FieldKey, is_empty


class PositionalSnapshot(Mapping):
    """Arguments keyed by position: ``{0: first, 1: second, ...}``."""

    def __init__(self, values: tuple[Any, ...]) -> None:
        self._values = tuple(values)

    def __getitem__(self, key: int) -> Any:
        if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < len(self._values):
            raise KeyError(key)
        return self._values[key]

    def __iter__(self) -> Iterator[int]:
        return iter(range(len(self._values)))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PositionalSnapshot({self._values!r})"


class NamedSnapshot(Mapping):
    """Arguments keyed by the rule's field names."""

    def __init__(self, values: dict[str, Any]) -> None:
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"NamedSnapshot({self._values!r})"


Snapshot = Union[PositionalSnapshot, NamedSnapshot]


def build_snapshot(rule: CaptureRule, args: tuple[Any, ...]) -> Snapshot:
    """Key ``args`` the way ``rule`` says.

    Names without a matching argument are left out; arguments beyond the
    last name are dropped.
    """
    if rule.positional:
        return PositionalSnapshot(args)
    return NamedSnapshot(dict(zip(rule.field_names, args)))


def missing_required(rule: CaptureRule, snapshot: Snapshot) -> FieldKey | None:
    """Return the first required field that is absent or empty, if any."""
    for key in rule.required:
        if is_empty(snapshot.get(key)):
            return key
    return None


def has_nonempty_value(snapshot: Snapshot | None) -> bool:
    """True if any captured value is non-empty."""
    if not snapshot:
        return False
    return any(not is_empty(value) for value in snapshot.values())
