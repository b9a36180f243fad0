"""Configuration handling for license-checker."""
from __future__ import annotations

from license_checker.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_checker.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
)
from license_checker.models.config import CheckerConfig

__all__ = [
    "CheckerConfig",
    "DEFAULT_CONFIG_NAMES",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]
