"""Pushes links to aria2: one multicall, sequential addUri on failure.

Per-link failures are reported in ``PushOutcome.failed``; only a total
outage (multicall and every sequential call failing at the transport
level) propagates.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from linkharvest.domain.entities import (
    Aria2Config,
    LinkRecord,
    PushFailure,
    PushOutcome,
)
from linkharvest.domain.exceptions import Aria2ResponseError, Aria2TransportError
from linkharvest.domain.ports import DownloadManagerPort
from linkharvest.infrastructure.rpc.aria2_client import DEFAULT_ARIA2_ENDPOINT

ADD_URI = "aria2.addUri"
MULTICALL = "system.multicall"
UNKNOWN_ERROR = "unknown aria2 error"
MISSING_RESULT = "missing multicall result"

log = structlog.get_logger(__name__)


def normalize_aria2_config(config: Aria2Config) -> Aria2Config:
    """Trim values; blank token/dir become absent, blank endpoint the default."""
    endpoint = (config.endpoint or "").strip() or DEFAULT_ARIA2_ENDPOINT
    token = (config.token or "").strip() or None
    directory = (config.dir or "").strip() or None
    return Aria2Config(endpoint=endpoint, token=token, dir=directory)


def build_add_uri_params(url: str, token: str | None = None, dir: str | None = None) -> list[Any]:
    """``["token:<t>"?, [url], {dir?}]``; the token always leads."""
    options: dict[str, Any] = {}
    if dir:
        options["dir"] = dir
    params: list[Any] = [[url], options]
    if token:
        params.insert(0, f"token:{token}")
    return params


def _fault_of(entry: Any) -> dict[str, Any] | None:
    first = entry[0] if isinstance(entry, list) and entry else entry
    if isinstance(first, dict) and "faultCode" in first:
        return first
    return None


def parse_multicall(entries: Sequence[Any], links: Sequence[LinkRecord]) -> PushOutcome:
    """Correlate multicall results with *links* by index.

    A fault entry is a failure, any other shape a success.  Links without
    a result entry count as failed; surplus entries are ignored.
    """
    outcome = PushOutcome()
    for index, link in enumerate(links):
        if index >= len(entries):
            outcome.failed.append(PushFailure(url=link.url, reason=MISSING_RESULT))
            continue
        fault = _fault_of(entries[index])
        if fault is not None:
            reason = str(fault.get("faultString") or UNKNOWN_ERROR)
            outcome.failed.append(PushFailure(url=link.url, reason=reason))
        else:
            outcome.succeeded += 1
    return outcome


class PushDispatcher:
    """Submits link selections to a download manager."""

    def __init__(self, rpc: DownloadManagerPort) -> None:
        self.rpc = rpc

    async def push(self, links: Sequence[LinkRecord], config: Aria2Config) -> PushOutcome:
        if not links:
            return PushOutcome()

        config = normalize_aria2_config(config)
        try:
            outcome = await self._push_multicall(links, config)
        except Exception as e:  # noqa: BLE001
            log.warning(
                "multicall_failed",
                endpoint=config.endpoint,
                links=len(links),
                error_type=type(e).__name__,
                error=str(e),
            )
            outcome = await self._push_sequential(links, config)

        log.info(
            "push_complete",
            endpoint=config.endpoint,
            succeeded=outcome.succeeded,
            failed=len(outcome.failed),
        )
        return outcome

    async def _push_multicall(
        self, links: Sequence[LinkRecord], config: Aria2Config
    ) -> PushOutcome:
        calls = [
            {
                "methodName": ADD_URI,
                "params": build_add_uri_params(link.url, config.token, config.dir),
            }
            for link in links
        ]
        result = await self.rpc.call(config, MULTICALL, [calls])
        if not isinstance(result, list):
            raise Aria2ResponseError("multicall result is not a list")
        return parse_multicall(result, links)

    async def _push_sequential(
        self, links: Sequence[LinkRecord], config: Aria2Config
    ) -> PushOutcome:
        outcome = PushOutcome()
        last_transport_error: Aria2TransportError | None = None
        transport_failures = 0

        for link in links:
            try:
                await self.rpc.call(
                    config,
                    ADD_URI,
                    build_add_uri_params(link.url, config.token, config.dir),
                )
            except Exception as e:  # noqa: BLE001
                if isinstance(e, Aria2TransportError):
                    transport_failures += 1
                    last_transport_error = e
                outcome.failed.append(
                    PushFailure(url=link.url, reason=str(e) or UNKNOWN_ERROR)
                )
                log.warning(
                    "add_uri_failed",
                    url=link.url,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                continue
            outcome.succeeded += 1

        if last_transport_error is not None and transport_failures == len(links):
            log.error("aria2_unreachable", endpoint=config.endpoint, links=len(links))
            raise last_transport_error

        return outcome


async def push_links(
    links: Sequence[LinkRecord],
    config: Aria2Config,
    rpc: DownloadManagerPort,
) -> PushOutcome:
    return await PushDispatcher(rpc).push(links, config)
