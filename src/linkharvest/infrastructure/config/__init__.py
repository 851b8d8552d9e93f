from __future__ import annotations

from .load import load_config
from .schema import AppConfig, Aria2Section, EnvOverrides

__all__ = ["AppConfig", "Aria2Section", "EnvOverrides", "load_config"]
