"""Shared fixtures for integration tests.

These tests use real infrastructure components (Aria2RpcClient,
HttpxPageFetcher, ScanPageUseCase) with mocked HTTP via respx.
"""

from __future__ import annotations

import httpx
import pytest


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client
