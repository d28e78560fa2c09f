"""Settings for the index service.

Values come from an optional JSON file, then ``ZKINDEX_<FIELD>`` environment
variables, and are validated with pydantic.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ValidationError, field_validator

from zkindex.errors import ConfigError
from zkindex.formatting import DEFAULT_FORMAT
from zkindex.models import SortMode
from zkindex.note_store import DEFAULT_ID_PATTERN

ENV_PREFIX = "ZKINDEX_"
CONFIG_ENV = "ZKINDEX_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/zkindex/config.json")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class IndexSettings(BaseModel):
    notes_dir: Path = Path("~/zettelkasten")
    extension: str = ".md"
    id_pattern: str = DEFAULT_ID_PATTERN
    index_format: str = DEFAULT_FORMAT
    show_ids: bool = True
    default_sort: SortMode = SortMode.MODIFIED
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("notes_dir")
    @classmethod
    def _expand_notes_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        if value and not value.startswith("."):
            return f".{value}"
        return value


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return raw


def load_settings(
    path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> IndexSettings:
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if path is None and environ.get(CONFIG_ENV):
        path = environ[CONFIG_ENV]
    if path is not None:
        values.update(_read_config_file(Path(path).expanduser()))
    else:
        default_path = DEFAULT_CONFIG_PATH.expanduser()
        if default_path.exists():
            values.update(_read_config_file(default_path))

    for name in IndexSettings.model_fields:
        key = f"{ENV_PREFIX}{name.upper()}"
        if key in environ:
            values[name] = environ[key]

    try:
        return IndexSettings(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def configure_logging(settings: IndexSettings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
