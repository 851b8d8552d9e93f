from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from linkharvest.domain.exceptions import RuleLoadError, RuleValidationError
from linkharvest.domain.rules import DEFAULT_FOLLOW_LIMIT, SiteRule
from linkharvest.infrastructure.rules.adapters import to_domain_site_rule
from linkharvest.infrastructure.rules.validation_schema import RuleFileModel

log = structlog.get_logger(__name__)


def parse_rules(
    data: Any, *, default_follow_limit: int = DEFAULT_FOLLOW_LIMIT
) -> list[SiteRule]:
    """Validate already-decoded rule data, returning domain rules.

    Accepts a list of rule mappings or a mapping with a ``rules`` key.
    """
    if data is None:
        raise RuleValidationError("rule file is empty")
    if isinstance(data, list):
        data = {"rules": data}
    if not isinstance(data, dict):
        raise RuleValidationError("rule file root must be a list or a mapping with 'rules'")

    model = RuleFileModel.model_validate(data)
    return [to_domain_site_rule(rule, default_follow_limit) for rule in model.rules]


def load_rules_file(
    path: Path, *, default_follow_limit: int = DEFAULT_FOLLOW_LIMIT
) -> list[SiteRule]:
    """Load and validate a YAML or JSON rule file."""
    try:
        raw = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
        rules = parse_rules(data, default_follow_limit=default_follow_limit)
    except (OSError, UnicodeDecodeError) as e:
        log.error(
            "rules_load_failed",
            rules_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise RuleLoadError(str(e)) from e
    except ValidationError as e:
        log.error(
            "rules_validation_failed",
            rules_file=str(path),
            error_type="ValidationError",
            error_details=e.errors(),
        )
        raise RuleValidationError(str(e)) from e
    except RuleValidationError as e:
        log.error(
            "rules_validation_failed",
            rules_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        log.error(
            "rules_validation_failed",
            rules_file=str(path),
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise RuleValidationError(str(e)) from e

    log.info("rules_loaded", rules_file=str(path), count=len(rules))
    return rules
