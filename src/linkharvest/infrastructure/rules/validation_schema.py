"""Pydantic validation models for custom rule files.

Keys may be written in camelCase (``hostSuffix``, ``titleFallback``) or
snake_case.  After validation the models are converted to the frozen
domain dataclasses in ``linkharvest.domain.rules`` by ``adapters``.
"""

from __future__ import annotations

import re
from typing import List, Literal, Optional

import soupsieve
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from linkharvest.domain.rules import DEFAULT_FOLLOW_LIMIT


class _RuleModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_regex(value: Optional[str], field: str) -> Optional[str]:
    if value is None or not value.strip():
        return None
    try:
        re.compile(value)
    except re.error as e:
        raise ValueError(f"{field} is not a valid regular expression: {e}") from e
    return value


def _check_selector(value: Optional[str], field: str) -> Optional[str]:
    if value is None or not value.strip():
        return None
    try:
        soupsieve.compile(value)
    except soupsieve.SelectorSyntaxError as e:
        raise ValueError(f"{field} is not a valid CSS selector: {e}") from e
    return value


class MatchModel(_RuleModel):
    host_suffix: List[str] = Field(default_factory=list)
    path_regex: Optional[str] = None
    host_regex: Optional[str] = None

    @field_validator("host_suffix", mode="before")
    @classmethod
    def _coerce_suffixes(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("host_suffix")
    @classmethod
    def _clean_suffixes(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s.strip()]

    @field_validator("path_regex")
    @classmethod
    def _validate_path_regex(cls, v: Optional[str]) -> Optional[str]:
        return _check_regex(v, "pathRegex")

    @field_validator("host_regex")
    @classmethod
    def _validate_host_regex(cls, v: Optional[str]) -> Optional[str]:
        return _check_regex(v, "hostRegex")


class SelectorsModel(_RuleModel):
    link: str = Field(min_length=1)
    row: Optional[str] = None
    title: Optional[str] = None
    seeders: Optional[str] = None
    leechers: Optional[str] = None
    size: Optional[str] = None

    @field_validator("link")
    @classmethod
    def _validate_link(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("selectors.link must not be blank")
        return _check_selector(v, "selectors.link")

    @field_validator("row", "title", "seeders", "leechers", "size")
    @classmethod
    def _validate_optional(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        return _check_selector(v, f"selectors.{info.field_name}")


class ExtractModel(_RuleModel):
    title_attr: Optional[str] = None
    title_fallback: List[Literal["magnetDn", "anchorText", "rowText", "href"]] = Field(
        default_factory=list
    )


class DetailRuleModel(_RuleModel):
    mode: Literal["row", "page"] = "page"
    selectors: SelectorsModel
    extract: Optional[ExtractModel] = None

    @model_validator(mode="after")
    def _validate_row(self) -> "DetailRuleModel":
        if self.mode == "row" and not self.selectors.row:
            raise ValueError("row mode requires 'selectors.row'")
        return self


class FollowModel(_RuleModel):
    href_selector: str = Field(min_length=1)
    limit: int = Field(default=DEFAULT_FOLLOW_LIMIT, ge=0)
    detail_rule: DetailRuleModel

    @field_validator("href_selector")
    @classmethod
    def _validate_href_selector(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("follow.hrefSelector must not be blank")
        return _check_selector(v, "follow.hrefSelector")


class SiteRuleModel(_RuleModel):
    """
    Pydantic validation model for one custom rule.

    Example (YAML):
      - id: nyaa
        name: Nyaa list
        mode: row
        match:
          hostSuffix: [nyaa.si]
        selectors:
          row: table tbody tr
          link: a[href^="magnet:"]
          title: td:nth-child(2) a
    """

    id: str = Field(min_length=1)
    name: Optional[str] = None
    enabled: bool = True
    mode: Literal["row", "page"] = "page"
    match: MatchModel = Field(default_factory=MatchModel)
    selectors: SelectorsModel
    extract: Optional[ExtractModel] = None
    follow: Optional[FollowModel] = None

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("rule id must not be blank")
        return v

    @model_validator(mode="after")
    def _validate_rule(self) -> "SiteRuleModel":
        if self.mode == "row" and not self.selectors.row and self.follow is None:
            raise ValueError("row mode requires 'selectors.row'")
        if not self.name:
            self.name = self.id
        return self


class RuleFileModel(BaseModel):
    rules: List[SiteRuleModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "RuleFileModel":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.id in seen:
                raise ValueError(f"duplicate rule id '{rule.id}'")
            seen.add(rule.id)
        return self
