"""
Capture rules for stashed filters.

A rule fixes, at registration time, how a hook's arguments are keyed,
when a firing may overwrite the stored snapshot, and which fields must
be non-empty for a capture to count.
"""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

FieldKey = Union[str, int]


class CaptureMode(Enum):
    """When a firing is allowed to write the hook's snapshot."""

    ALWAYS = "always"  # Every firing overwrites
    FIRST = "first"  # Only the first accepted firing
    UNTIL_NONEMPTY = "empty"  # Keep overwriting until a non-empty value lands


class InvalidCaptureRule(ValueError):
    """Raised when a capture rule is misconfigured."""


def is_empty(value: Any) -> bool:
    """Return True for values the host treats as empty.

    None, False, zero, "", "0" and empty containers are empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, Sized):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class CaptureRule:
    """How one hook's firings are captured."""

    hook: str
    field_names: tuple[str, ...] = ()
    mode: CaptureMode = CaptureMode.ALWAYS
    required: tuple[FieldKey, ...] = ()

    def __post_init__(self) -> None:
        if not self.hook:
            raise InvalidCaptureRule("Hook name must not be empty")

        # Accept lists and mode strings from callers and config files
        object.__setattr__(self, "field_names", tuple(self.field_names))
        object.__setattr__(self, "required", tuple(self.required))
        if not isinstance(self.mode, CaptureMode):
            try:
                object.__setattr__(self, "mode", CaptureMode(self.mode))
            except ValueError:
                valid = ", ".join(m.value for m in CaptureMode)
                raise InvalidCaptureRule(
                    f"Unknown capture mode for {self.hook}: {self.mode!r} (expected one of: {valid})"
                ) from None

        if len(set(self.field_names)) != len(self.field_names):
            raise InvalidCaptureRule(f"Duplicate field names for {self.hook}: {self.field_names}")

        for key in self.required:
            if self.positional:
                if isinstance(key, bool) or not isinstance(key, int) or key < 0:
                    raise InvalidCaptureRule(
                        f"Required field for {self.hook} must be a non-negative index, got {key!r}"
                    )
            elif key not in self.field_names:
                raise InvalidCaptureRule(
                    f"Required field {key!r} for {self.hook} is not one of {list(self.field_names)}"
                )

    @property
    def positional(self) -> bool:
        """True when arguments are keyed by position rather than name."""
        return not self.field_names
