"""Layered configuration loading.

Precedence, lowest first: defaults < YAML file < env vars (.env included)
< CLI overrides.  Each layer is brought into the sectioned shape of
``config.yaml`` before merging, so flat keys (``aria2_token``, as env vars
and CLI flags produce them) and sectioned keys (``aria2: {token: ...}``)
can be mixed freely.
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: tuple[str, ...] = ("aria2", "http", "follow", "rules", "extraction", "logging")
_TOP_LEVEL_KEYS: tuple[str, ...] = ("app_name", "environment")

# flat key -> (section, key inside the section)
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "aria2_endpoint": ("aria2", "endpoint"),
    "aria2_token": ("aria2", "token"),
    "aria2_dir": ("aria2", "dir"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "http_cookies": ("http", "cookies"),
    "follow_batch_size": ("follow", "batch_size"),
    "follow_default_limit": ("follow", "default_limit"),
    "rules_file": ("rules", "rules_file"),
    "download_keywords": ("extraction", "download_keywords"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested mappings merge, anything else replaces."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape; unknown keys are dropped."""
    out: dict[str, Any] = {key: layer[key] for key in _TOP_LEVEL_KEYS if key in layer}

    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat_key, (section, key) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[key] = layer[flat_key]

    return out


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)

    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")

    layer = _sectioned(parsed)

    # A relative rules file is relative to the config file, not the cwd
    rules_file = layer.get("rules", {}).get("rules_file")
    if isinstance(rules_file, str) and rules_file.strip():
        path = Path(rules_file).expanduser()
        if not path.is_absolute():
            layer["rules"]["rules_file"] = str(config_path.parent / path)

    return layer


def _env_layer(dotenv_path: Path | None) -> dict[str, Any]:
    # .env values land in os.environ and are read like real env vars;
    # variables already set win over the file.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)
    return _sectioned(EnvOverrides().to_update_dict())


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated AppConfig from all layers.

    Raises:
        FileNotFoundError: *config_path* or *dotenv_path* does not exist.
        ValueError: the YAML root is not a mapping.
        pydantic.ValidationError: the merged values are invalid.

    Reads files only; never creates any.
    """
    layers: list[dict[str, Any]] = [_sectioned(deepcopy(DEFAULT_CONFIG))]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(_env_layer(dotenv_path))
    layers.append(_sectioned(cli_overrides or {}))

    merged: dict[str, Any] = {}
    for layer in layers:
        _deep_merge(merged, layer)

    return AppConfig.model_validate(merged)
