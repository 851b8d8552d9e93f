"""Push a link selection to aria2."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from linkharvest.domain.entities import Aria2Config, LinkRecord, PushOutcome
from linkharvest.domain.ports import DownloadManagerPort
from linkharvest.infrastructure.rpc import PushDispatcher

log = structlog.get_logger(__name__)


class PushLinksUseCase:
    """Submits links to the download manager and reports per-link failures."""

    def __init__(self, rpc: DownloadManagerPort):
        self.dispatcher = PushDispatcher(rpc)

    async def execute(
        self, links: Sequence[LinkRecord], config: Aria2Config
    ) -> PushOutcome:
        outcome = await self.dispatcher.push(links, config)
        for failure in outcome.failed:
            log.warning("link_push_failed", url=failure.url, reason=failure.reason)
        log.info(
            "push_links_complete",
            requested=len(links),
            succeeded=outcome.succeeded,
            failed=len(outcome.failed),
        )
        return outcome
