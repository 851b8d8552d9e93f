"""aria2 JSON-RPC client and push dispatcher."""

from __future__ import annotations

from .aria2_client import DEFAULT_ARIA2_ENDPOINT, Aria2RpcClient, build_request
from .push_dispatcher import (
    PushDispatcher,
    build_add_uri_params,
    normalize_aria2_config,
    parse_multicall,
    push_links,
)

__all__ = [
    "DEFAULT_ARIA2_ENDPOINT",
    "Aria2RpcClient",
    "PushDispatcher",
    "build_add_uri_params",
    "build_request",
    "normalize_aria2_config",
    "parse_multicall",
    "push_links",
]
