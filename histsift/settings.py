"""Persistent JSON settings for search mode, layout style, and database path.

All access is defensive: malformed or missing config falls back to defaults.
Settings are read once per invocation and never written back by the session.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "histsift"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_DB_PATH = Path(user_data_dir(APP_NAME, appauthor=False)) / "history.db"
DB_PATH_ENV = "HISTSIFT_DB_PATH"

logger = logging.getLogger(__name__)


class SearchMode(str, Enum):
    """Matching algorithm requested from the store."""

    PREFIX = "prefix"
    FULLTEXT = "fulltext"
    FUZZY = "fuzzy"


class Style(str, Enum):
    """Rendering density policy for the interactive session."""

    AUTO = "auto"
    COMPACT = "compact"
    FULL = "full"


@dataclass(frozen=True)
class Settings:
    search_mode: SearchMode = SearchMode.FUZZY
    style: Style = Style.AUTO
    db_path: Path = DEFAULT_DB_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _load_enum(data: dict[str, object], key: str, enum_type, default):
    value = data.get(key)
    if not isinstance(value, str):
        return default
    try:
        return enum_type(value.strip().lower())
    except ValueError:
        logger.warning("ignoring unknown %s %r", key, value)
        return default


def _load_db_path(data: dict[str, object]) -> Path:
    env_value = os.environ.get(DB_PATH_ENV, "").strip()
    if env_value:
        return Path(env_value).expanduser()
    value = data.get("db_path")
    if isinstance(value, str) and value.strip():
        return Path(value.strip()).expanduser()
    return DEFAULT_DB_PATH


def load_settings() -> Settings:
    """Resolve session settings from config file and environment."""
    data = load_config()
    return Settings(
        search_mode=_load_enum(data, "search_mode", SearchMode, SearchMode.FUZZY),
        style=_load_enum(data, "style", Style, Style.AUTO),
        db_path=_load_db_path(data),
    )
