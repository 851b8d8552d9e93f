"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkharvest.domain.entities import Aria2Config
from linkharvest.infrastructure.extraction.heuristics import DEFAULT_DOWNLOAD_KEYWORDS
from linkharvest.infrastructure.rpc.aria2_client import DEFAULT_ARIA2_ENDPOINT

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


class Aria2Section(BaseModel):
    """aria2 JSON-RPC target (YAML section: aria2.*)."""

    endpoint: str = Field(
        default=DEFAULT_ARIA2_ENDPOINT,
        description="JSON-RPC endpoint URL.",
    )
    token: Optional[str] = Field(
        default=None,
        description="RPC secret, sent as the leading 'token:<value>' parameter.",
    )
    dir: Optional[str] = Field(
        default=None,
        description="Download directory passed in the addUri options.",
    )

    @field_validator("endpoint", mode="before")
    @classmethod
    def _default_endpoint(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return DEFAULT_ARIA2_ENDPOINT if v is None else v

    @field_validator("token", "dir", mode="before")
    @classmethod
    def _strip_optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_domain(self) -> Aria2Config:
        return Aria2Config(endpoint=self.endpoint, token=self.token, dir=self.dir)


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (aria2/http/follow/rules/extraction/logging).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="linkharvest", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # aria2 (YAML section: aria2.*)
    aria2: Aria2Section = Field(default_factory=Aria2Section)

    # HTTP for follow-crawling and page fetches (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for page fetches and RPC calls.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; linkharvest/0.1.0)",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_cookies: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "http_cookies",
            AliasPath("http", "cookies"),
        ),
        description="Cookies sent with every follow-crawl fetch.",
    )

    # Follow-crawling (YAML section: follow.*)
    follow_batch_size: int = Field(
        default=5,
        validation_alias=AliasChoices(
            "follow_batch_size",
            AliasPath("follow", "batch_size"),
        ),
        description="Concurrent detail-page fetches per batch.",
    )
    follow_default_limit: int = Field(
        default=30,
        validation_alias=AliasChoices(
            "follow_default_limit",
            AliasPath("follow", "default_limit"),
        ),
        description="Detail-page cap for rules that do not set one.",
    )

    # Custom rules (YAML section: rules.*)
    rules_file: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices(
            "rules_file",
            AliasPath("rules", "rules_file"),
        ),
        description="YAML/JSON file with custom site rules.",
    )

    # Generic extraction (YAML section: extraction.*)
    download_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DOWNLOAD_KEYWORDS),
        validation_alias=AliasChoices(
            "download_keywords",
            AliasPath("extraction", "download_keywords"),
        ),
        description="Keywords marking an HTTP anchor as a likely download.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    @field_validator("rules_file", mode="before")
    @classmethod
    def _validate_rules_file(cls, v: Any) -> Optional[Path]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("follow_batch_size")
    @classmethod
    def _validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("follow_batch_size must be >= 1")
        return v

    @field_validator("follow_default_limit")
    @classmethod
    def _validate_default_limit(cls, v: int) -> int:
        if v < 0:
            raise ValueError("follow_default_limit must be >= 0")
        return v

    @field_validator("download_keywords")
    @classmethod
    def _clean_keywords(cls, v: list[str]) -> list[str]:
        cleaned = [k.strip().lower() for k in v if k.strip()]
        if not cleaned:
            raise ValueError("download_keywords must not be empty")
        return cleaned

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_aria2_config(self) -> Aria2Config:
        return self.aria2.to_domain()

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "aria2": self.aria2.model_dump(),
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
                "cookies": dict(self.http_cookies),
            },
            "follow": {
                "batch_size": self.follow_batch_size,
                "default_limit": self.follow_default_limit,
            },
            "rules": {
                "rules_file": str(self.rules_file) if self.rules_file else None,
            },
            "extraction": {"download_keywords": list(self.download_keywords)},
            "logging": {"level": self.log_level, "format": self.log_format},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read LINKHARVEST_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - LINKHARVEST_ARIA2_ENDPOINT
    - LINKHARVEST_ARIA2_TOKEN
    - LINKHARVEST_HTTP_TIMEOUT_SECONDS
    - LINKHARVEST_FOLLOW_BATCH_SIZE
    - LINKHARVEST_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="LINKHARVEST_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    aria2_endpoint: Optional[str] = None
    aria2_token: Optional[str] = None
    aria2_dir: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    follow_batch_size: Optional[int] = None
    follow_default_limit: Optional[int] = None

    rules_file: Optional[Path] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    @field_validator("rules_file", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
