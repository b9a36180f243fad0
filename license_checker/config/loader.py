"""Loading of the optional ``.license-checker.yaml`` project file."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from license_checker.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from license_checker.exceptions import ConfigurationError
from license_checker.models.config import CheckerConfig

logger = logging.getLogger(__name__)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the project's config file, if it has one.

    Only ``start_dir`` itself is checked, not its parents. The ``.yaml``
    spelling is preferred when both files exist.

    Args:
        start_dir: Project root. The working directory when omitted.
    """
    project_root = start_dir or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = project_root / name
        if candidate.exists():
            return candidate
    return None


def _read_mapping(path: Path) -> dict[str, Any] | None:
    """Read a YAML file, returning None when it holds no settings."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file '{path}': {e}"
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in '{path}': "
            f"expected a mapping at root level, got {type(data).__name__}"
        )
    return data


def load_config_file(path: Path) -> CheckerConfig:
    """Build a CheckerConfig from one YAML file.

    A blank or comment-only file yields the defaults.

    Raises:
        ConfigurationError: Unreadable file, bad YAML, a non-mapping root,
            or settings rejected by the model (unknown keys included).
    """
    data = _read_mapping(path)
    if data is None:
        logger.debug("%s has no settings, using defaults", path)
        return get_default_config()

    try:
        config = CheckerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_describe_errors(e)}"
        ) from e

    logger.debug("Loaded configuration from %s", path)
    return config


def _describe_errors(error: ValidationError) -> str:
    """Join model errors as ``field.path: message`` pairs."""
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
        for err in error.errors()
    )


def load_config(
    config_path: str | None = None, search_dir: Path | None = None
) -> CheckerConfig:
    """Resolve the settings for one run.

    An explicit ``config_path`` always wins. Without one, the scanned project
    root (``search_dir``) is checked for a config file, and the defaults are
    used when there is none.

    Raises:
        ConfigurationError: If the chosen file cannot be loaded.
    """
    if config_path is not None:
        return load_config_file(Path(config_path))

    discovered = find_config_file(search_dir)
    if discovered is None:
        return get_default_config()
    return load_config_file(discovered)
