"""Site rules: built-ins, presets, custom rule files, resolution."""

from __future__ import annotations

from .builtin import (
    BUILTIN_RULES,
    GENERIC_RULE,
    PIRATEBAY_RULE,
    builtin_rules,
    preset_rules,
)
from .loader import load_rules_file, parse_rules
from .resolver import matches, resolve_rule

__all__ = [
    "BUILTIN_RULES",
    "GENERIC_RULE",
    "PIRATEBAY_RULE",
    "builtin_rules",
    "load_rules_file",
    "matches",
    "parse_rules",
    "preset_rules",
    "resolve_rule",
]
