"""Release-title normalization used as the dedup/ranking key.

Pure transformation logic, no I/O.  Two titles that differ only by
cosmetic release tags (resolution, codec, container, audio, HDR) or
punctuation normalize to the same key.
"""

from __future__ import annotations

import re

from unidecode import unidecode as _unidecode

_BRACKETS_RE = re.compile(r"[\[\](){}]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

# Applied after punctuation collapse, so "H.264" arrives as "h 264" and
# "WEB-DL" as "web dl".
RELEASE_TAGS: tuple[str, ...] = (
    # resolution
    r"480p", r"576p", r"720p", r"1080[pi]", r"2160p", r"4k", r"uhd",
    # video codec
    r"hevc", r"avc", r"x26[45]", r"h ?26[45]", r"av1", r"10bit", r"8bit",
    # source
    r"web ?dl", r"web ?rip", r"blu ?ray", r"brrip", r"bdrip", r"hdrip",
    r"dvdrip", r"remux",
    # container
    r"mkv", r"mp4", r"avi",
    # audio codec
    r"aac(?: ?\d(?: \d)?)?", r"e?ac3", r"dts", r"ddp?\d(?: \d)?", r"ddp",
    r"flac", r"atmos", r"truehd",
    # HDR variants
    r"hdr10(?: ?plus)?", r"hdr", r"dovi", r"dolby vision", r"dolby",
)

_RELEASE_TAG_RE = re.compile(r"\b(?:" + "|".join(RELEASE_TAGS) + r")\b")


def normalize_title(title: str) -> str:
    """Lowercase, transliterate, drop brackets, punctuation and release tags."""
    text = _unidecode(title or "").lower()
    text = _BRACKETS_RE.sub("", text)
    text = _NON_ALNUM_RE.sub(" ", text)
    text = _RELEASE_TAG_RE.sub(" ", text)
    return " ".join(text.split())
