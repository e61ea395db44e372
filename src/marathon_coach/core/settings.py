"""
YAML -> typed settings loader.

Defaults come from config.py; an optional user file at
``<home>/config.yaml`` overrides them.  ``<home>`` is ``~/.marathon-coach``
unless the MARATHON_COACH_HOME environment variable points elsewhere.

Example config.yaml:

    data_dir: ~/Dropbox/marathon
    delimiter: ";"
    log_level: INFO

If the user file cannot be parsed it is ignored with a warning (no crash).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .config import (
    CONFIG_FILE_NAME,
    DEFAULT_DELIMITER,
    DEFAULT_LOG_LEVEL,
    HOME_ENV_VAR,
    default_home,
)

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Resolved runtime settings."""

    data_dir: Path
    delimiter: str = DEFAULT_DELIMITER
    log_level: str = DEFAULT_LOG_LEVEL


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; return {} and warn on any parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a mapping", path)
        return {}
    return data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_home_dir() -> Path:
    """Return the application home directory (env override or ~/.marathon-coach)."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return default_home()


def load_settings(home: Path | None = None) -> Settings:
    """
    Load settings, merging the optional user YAML over the defaults.

    Args:
        home: Application home directory (default: get_home_dir())

    Returns:
        Settings with data_dir resolved to an absolute-ish Path
    """
    if home is None:
        home = get_home_dir()

    settings = Settings(data_dir=home)

    user_file = home / CONFIG_FILE_NAME
    if not user_file.exists():
        return settings

    raw = _load_yaml_file(user_file)

    if raw.get("data_dir"):
        settings.data_dir = Path(str(raw["data_dir"])).expanduser()

    delimiter = raw.get("delimiter")
    if delimiter is not None:
        if isinstance(delimiter, str) and len(delimiter) == 1:
            settings.delimiter = delimiter
        else:
            logger.warning("Ignoring delimiter %r: must be a single character", delimiter)

    if raw.get("log_level"):
        settings.log_level = str(raw["log_level"]).upper()

    return settings
