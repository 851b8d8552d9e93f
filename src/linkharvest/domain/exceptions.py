"""Exception hierarchy for rule loading and aria2 dispatch."""

from __future__ import annotations


class LinkHarvestError(Exception):
    """Base class for all linkharvest errors."""


class RuleError(LinkHarvestError):
    """Base class for rule-related errors."""


class RuleValidationError(RuleError):
    """Raised when a custom rule definition fails schema validation."""


class RuleLoadError(RuleError):
    """Raised when a rule file cannot be read."""


class Aria2Error(LinkHarvestError):
    """Base error for aria2 JSON-RPC calls."""


class Aria2HttpError(Aria2Error):
    """The endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class Aria2RpcError(Aria2Error):
    """The JSON-RPC envelope carried a top-level ``error``."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class Aria2TransportError(Aria2Error):
    """The request never got an HTTP response (connect/read failure)."""


class Aria2ResponseError(Aria2Error):
    """The response was not a usable JSON-RPC envelope."""
