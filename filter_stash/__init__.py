"""
filter-stash - capture the arguments a filter hook fires with.

Stash a hook once, then read back what it was last (or first) called with
from anywhere else in the process.
"""

from .helpers import (
    clear_stashed,
    get_all_stashed,
    get_stashed,
    get_stasher,
    has_stashed,
    list_stashed,
    reset_stasher,
    stash_filter,
)
from .rules import CaptureMode, CaptureRule, InvalidCaptureRule
from .snapshot import NamedSnapshot, PositionalSnapshot
from .stasher import Stasher

__all__ = [
    "CaptureMode",
    "CaptureRule",
    "InvalidCaptureRule",
    "NamedSnapshot",
    "PositionalSnapshot",
    "Stasher",
    "clear_stashed",
    "get_all_stashed",
    "get_stashed",
    "get_stasher",
    "has_stashed",
    "list_stashed",
    "reset_stasher",
    "stash_filter",
]
