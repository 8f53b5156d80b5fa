# src/fleetgeo/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/fleetgeo/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `FLEETGEO_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `FLEETGEO_LOG_LEVEL`)

Design rule:
- Operational tuning knobs live in YAML. Geometry constants (Earth radius, coordinate
  bounds) are part of the calculation contract and stay in `fleetgeo.geo.constants`.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from fleetgeo.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `fleetgeo.config`."""
    text = resources.files("fleetgeo.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "FleetGeo"
    log_level: str = "INFO"


class SearchSettings(BaseModel):
    nearest_limit: int = Field(10, ge=1, le=1000)


class AccuracySettings(BaseModel):
    high_m: float = Field(10, ge=0)
    medium_m: float = Field(30, ge=0)
    low_m: float = Field(50, ge=0)

    @model_validator(mode="after")
    def _validate_order(self) -> "AccuracySettings":
        if not (self.high_m <= self.medium_m <= self.low_m):
            raise ValueError("accuracy thresholds must satisfy high_m <= medium_m <= low_m")
        return self


class MotionSettings(BaseModel):
    moving_threshold_kmh: float = Field(1.0, ge=0)
    stopped_threshold_kmh: float = Field(0.5, ge=0)
    smoothing_alpha: float = Field(0.3, ge=0, le=1)
    average_speed_kmh: float = Field(36.0, gt=0)


class GridSettings(BaseModel):
    heatmap_cell_deg: float = Field(0.01, gt=0)
    heatmap_saturation_count: int = Field(10, ge=1)
    frequent_area_cell_deg: float = Field(0.01, gt=0)
    frequent_area_limit: int = Field(20, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    accuracy: AccuracySettings = Field(default_factory=AccuracySettings)
    motion: MotionSettings = Field(default_factory=MotionSettings)
    grid: GridSettings = Field(default_factory=GridSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is intentionally small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("FLEETGEO_LOG_LEVEL")
    if log_level:
        data["app"] = {**(data.get("app") or {}), "log_level": log_level}

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("FLEETGEO_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
