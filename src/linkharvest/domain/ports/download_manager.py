"""Port for the remote download manager."""

from __future__ import annotations

from typing import Any, Protocol

from linkharvest.domain.entities import Aria2Config


class DownloadManagerPort(Protocol):
    """Async JSON-RPC call interface (aria2 flavour)."""

    async def call(
        self, config: Aria2Config, method: str, params: list[Any] | None = None
    ) -> Any: ...
