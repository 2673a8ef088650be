"""Filter configuration files and environment defaults."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .filter import FilterOption

SCHEMA_ROOT = Path(os.environ.get("SCHEMA_SCOPE_ROOT", "schemas"))


def default_distance() -> int:
    """Distance used when neither a config file nor a flag sets one."""
    raw = os.environ.get("SCHEMA_SCOPE_DISTANCE", "0")
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"SCHEMA_SCOPE_DISTANCE must be an integer, got '{raw}'") from exc
    if value < 0:
        raise ConfigError(f"SCHEMA_SCOPE_DISTANCE must not be negative, got {value}")
    return value


class FilterConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    include: List[str] = []
    exclude: List[str] = []
    include_labels: List[str] = Field(default_factory=list, alias="includeLabels")
    distance: int = Field(default_factory=default_distance, ge=0)
    both_directions: bool = Field(default=True, alias="bothDirections")

    def to_option(self) -> FilterOption:
        return FilterOption(
            include=tuple(self.include),
            exclude=tuple(self.exclude),
            include_labels=tuple(self.include_labels),
            distance=self.distance,
            both_directions=self.both_directions,
        )


def load_filter_config(path: Path) -> FilterConfig:
    """Load filter settings from a JSON file.

    Accepts the flat keys of FilterConfig as well as the tbls layout, where
    the distance is nested under ``er.distance``.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to parse JSON at {path}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config at {path} must be a JSON object")
    return filter_config_from_dict(data)


def filter_config_from_dict(data: Dict[str, Any]) -> FilterConfig:
    data = dict(data)
    er = data.get("er")
    if "distance" not in data and isinstance(er, dict) and "distance" in er:
        data["distance"] = er["distance"]

    try:
        return FilterConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid filter configuration: {exc}") from exc
