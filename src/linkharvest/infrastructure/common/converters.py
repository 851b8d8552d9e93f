"""Type conversion utilities."""

from __future__ import annotations

import re

# ASCII digits only: str.isdigit() also accepts "①" and "²", which int() rejects
_PLAIN_INT_RE = re.compile(r"^[0-9]+$")
# Thousands separators seen in swarm columns: "1,234", "1 234", "1.234"
_GROUPED_INT_RE = re.compile(r"^[0-9]{1,3}(?:[,\s .][0-9]{3})+$")


def to_int(raw: str | int | None) -> int | None:
    """Convert a stat cell to int, return None if it is not a number.

    Handles:
        - None → None
        - int → int (passthrough)
        - "123" → 123
        - "1,234" / "1 234" → 1234
        - "" → None
        - "n/a", "04-12 2023", "①" → None

    Unlike a digit scrape, text with anything but digits and thousands
    separators yields None, so a date cell never reads as a seed count.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, str):
        txt = raw.strip()
        if not txt:
            return None
        if _PLAIN_INT_RE.match(txt):
            return int(txt)
        if _GROUPED_INT_RE.match(txt):
            return int(re.sub(r"[^0-9]", "", txt))
        return None

    return None
