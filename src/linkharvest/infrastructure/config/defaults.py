"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from linkharvest.infrastructure.extraction.heuristics import DEFAULT_DOWNLOAD_KEYWORDS
from linkharvest.infrastructure.rpc.aria2_client import DEFAULT_ARIA2_ENDPOINT

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "linkharvest",
    "environment": "dev",
    "aria2": {
        "endpoint": DEFAULT_ARIA2_ENDPOINT,
        "token": None,
        "dir": None,
    },
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agent": "Mozilla/5.0 (compatible; linkharvest/0.1.0)",
        "cookies": {},
    },
    "follow": {
        "batch_size": 5,
        "default_limit": 30,
    },
    "rules": {
        "rules_file": None,
    },
    "extraction": {
        "download_keywords": list(DEFAULT_DOWNLOAD_KEYWORDS),
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
}
