"""Load stash rules from YAML configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .rules import InvalidCaptureRule
from .stasher import Stasher

logger = logging.getLogger("filter-stash.loader")


def _as_list(value: object) -> list:
    """Allow a single name in place of a one-item list."""
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [value]
    return list(value)  # type: ignore[call-overload]


def load_stash_rules(config_path: Path, stasher: Stasher | None = None) -> int:
    """Register the stash rules declared in a YAML config file.

    Example::

        stash:
          - filter: the_title
            params: [title, post_id]
            mode: first
            required: [post_id]

    Returns the number of rules successfully registered.
    """
    if stasher is None:
        from .helpers import get_stasher

        stasher = get_stasher()

    try:
        config = yaml.safe_load(Path(config_path).read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        logger.error("Failed to read stash config: %s", config_path, exc_info=True)
        return 0

    if not isinstance(config, dict):
        logger.warning("Stash config is not a mapping: %s", config_path)
        return 0

    rule_list = config.get("stash", [])
    if not isinstance(rule_list, list):
        logger.warning("Stash rule list in %s is not a list", config_path)
        return 0

    count = 0
    for rule_def in rule_list:
        if not isinstance(rule_def, dict):
            logger.warning("Skipping malformed stash rule: %r", rule_def)
            continue
        if not rule_def.get("enabled", True):
            continue

        hook = rule_def.get("filter", "")
        try:
            stasher.register(
                hook,
                field_names=_as_list(rule_def.get("params")),
                mode=rule_def.get("mode", "always"),
                required=_as_list(rule_def.get("required")),
            )
        except (InvalidCaptureRule, TypeError):
            logger.error("Invalid stash rule for %r", hook, exc_info=True)
            continue
        count += 1

    return count
