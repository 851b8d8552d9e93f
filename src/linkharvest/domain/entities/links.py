from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def new_link_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ScanContext:
    """Host and URL of the page being scanned."""

    host: str
    url: str


@dataclass
class LinkRecord:
    """One discovered resource (magnet, torrent file or direct download)."""

    url: str
    title: str
    source_host: str
    id: str = field(default_factory=new_link_id)

    # Dedup/ranking key, absent when the title normalizes to nothing
    normalized_title: str | None = None

    # Swarm health, only where the site exposes it
    seeders: int | None = None
    leechers: int | None = None
    size: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "sourceHost": self.source_host,
        }
        if self.normalized_title:
            data["normalizedTitle"] = self.normalized_title
        if self.seeders is not None:
            data["seeders"] = self.seeders
        if self.leechers is not None:
            data["leechers"] = self.leechers
        if self.size is not None:
            data["size"] = self.size
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LinkRecord:
        """Build a record from the camelCase wire shape (or snake_case)."""
        url = str(data.get("url") or "").strip()
        if not url:
            raise ValueError("link record requires a non-empty 'url'")
        return cls(
            url=url,
            title=str(data.get("title") or url),
            source_host=str(data.get("sourceHost") or data.get("source_host") or ""),
            id=str(data.get("id") or new_link_id()),
            normalized_title=data.get("normalizedTitle") or data.get("normalized_title"),
            seeders=_optional_int(data.get("seeders")),
            leechers=_optional_int(data.get("leechers")),
            size=data.get("size"),
        )


def _optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass
class RowLinkGroup:
    """Links found inside one visible row element (row mode only).

    A link whose URL was first seen in an earlier row is still listed here,
    so selecting a row selects every link it shows.
    """

    index: int
    links: list[LinkRecord] = field(default_factory=list)


@dataclass
class RowExtraction:
    links: list[LinkRecord]
    groups: list[RowLinkGroup]


@dataclass(frozen=True)
class Aria2Config:
    """aria2 JSON-RPC endpoint settings."""

    endpoint: str
    token: str | None = None
    dir: str | None = None


@dataclass(frozen=True)
class PushFailure:
    url: str
    reason: str


@dataclass
class PushOutcome:
    """Result of one push call; produced once, never streamed."""

    succeeded: int = 0
    failed: list[PushFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + len(self.failed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": [{"url": f.url, "reason": f.reason} for f in self.failed],
        }


@dataclass
class ScanResult:
    """Links produced by one scan, with the rule that produced them."""

    rule_id: str
    rule_name: str
    context: ScanContext
    links: list[LinkRecord]
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def count(self) -> int:
        return len(self.links)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "tabUrl": self.context.url,
            "createdAt": self.created_at.isoformat(),
            "count": self.count,
            "links": [link.to_dict() for link in self.links],
        }
