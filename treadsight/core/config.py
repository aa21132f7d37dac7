"""
core/config.py
--------------
Loads, validates, and exposes the application config from a YAML file.

Usage:
    from treadsight.core.config import load_config, AppConfig
    cfg = load_config()            # loads config/default.yaml
    cfg = load_config("my.yaml")   # loads a custom file
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from treadsight.core.exceptions import ConfigError
from treadsight.core.models import Climate, DrivingStyle, Rotation, WeatherMode

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_CONFIG = _PROJECT_ROOT / "config" / "default.yaml"


def _require_all_members(table: dict, enum_cls: type[Enum], name: str) -> dict:
    missing = [m.value for m in enum_cls if m not in table]
    if missing:
        raise ValueError(f"{name} is missing entries for {missing}")
    return table


# ---------------------------------------------------------------------------
# Pydantic sub-models
# ---------------------------------------------------------------------------

class IngestionConfig(BaseModel):
    max_dimension: int = Field(400, gt=0)
    default_miles_per_year: int = Field(12000, ge=0)


class QualityConfig(BaseModel):
    min_acceptable: float = Field(0.35, ge=0.0, le=1.0)
    brightness_weight: float = 0.25
    contrast_weight: float = 0.35
    sharpness_weight: float = 0.40


class ClassifierConfig(BaseModel):
    edge_weight: float = 0.45
    texture_weight: float = 0.35
    contrast_weight: float = 0.20
    edge_threshold: float = 30.0
    # Descending signal cut-offs for NEW, HEALTHY, MODERATE, LOW
    bucket_thresholds: list[float] = [0.70, 0.50, 0.35, 0.20]
    min_confidence: float = Field(0.55, ge=0.0, le=1.0)
    max_confidence: float = Field(0.90, ge=0.0, le=1.0)

    @field_validator("bucket_thresholds")
    @classmethod
    def must_descend(cls, v: list[float]) -> list[float]:
        if len(v) != 4:
            raise ValueError("bucket_thresholds needs exactly 4 values")
        if any(a <= b for a, b in zip(v, v[1:])):
            raise ValueError("bucket_thresholds must be strictly descending")
        return v


class WearConfig(BaseModel):
    base_rate_per_1000_miles: float = Field(0.14, gt=0)
    wet_traction_depth: float = 4.0
    legal_minimum_depth: float = 2.0
    climate_modifiers: dict[Climate, float] = {
        Climate.COLD: 1.05,
        Climate.MODERATE: 1.0,
        Climate.HOT: 1.15,
        Climate.NEUTRAL: 1.0,
    }
    rotation_modifiers: dict[Rotation, float] = {
        Rotation.NORMAL: 1.0,
        Rotation.SKIP_ROTATIONS: 1.15,
    }
    driving_modifiers: dict[DrivingStyle, float] = {
        DrivingStyle.NORMAL: 1.0,
        DrivingStyle.AGGRESSIVE: 1.10,
    }

    @field_validator("climate_modifiers")
    @classmethod
    def all_climates(cls, v: dict) -> dict:
        return _require_all_members(v, Climate, "climate_modifiers")

    @field_validator("rotation_modifiers")
    @classmethod
    def all_rotations(cls, v: dict) -> dict:
        return _require_all_members(v, Rotation, "rotation_modifiers")

    @field_validator("driving_modifiers")
    @classmethod
    def all_driving_styles(cls, v: dict) -> dict:
        return _require_all_members(v, DrivingStyle, "driving_modifiers")

    @model_validator(mode="after")
    def legal_below_wet(self) -> "WearConfig":
        if self.legal_minimum_depth > self.wet_traction_depth:
            raise ValueError("legal_minimum_depth must not exceed wet_traction_depth")
        return self


class WeatherThreshold(BaseModel):
    multiplier: float = Field(1.0, gt=0)
    warning_depth: float = 4.0
    critical_depth: float = 2.0


class WeatherConfig(BaseModel):
    dry: WeatherThreshold = WeatherThreshold(multiplier=1.0, warning_depth=4.0, critical_depth=2.0)
    wet: WeatherThreshold = WeatherThreshold(multiplier=1.35, warning_depth=5.0, critical_depth=3.0)
    snow: WeatherThreshold = WeatherThreshold(multiplier=1.70, warning_depth=6.0, critical_depth=4.0)

    def for_mode(self, mode: WeatherMode) -> WeatherThreshold:
        return getattr(self, mode.value)


class DeteriorationConfig(BaseModel):
    crack_seed: int = 42
    uneven_wear: bool = False


class LoggingConfig(BaseModel):
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Root config model
# ---------------------------------------------------------------------------

class AppConfig(BaseModel):
    ingestion: IngestionConfig = IngestionConfig()
    quality: QualityConfig = QualityConfig()
    classifier: ClassifierConfig = ClassifierConfig()
    wear: WearConfig = WearConfig()
    weather: WeatherConfig = WeatherConfig()
    deterioration: DeteriorationConfig = DeteriorationConfig()
    logging: LoggingConfig = LoggingConfig()


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate AppConfig from a YAML file.

    Args:
        path: Explicit path to a YAML file. Defaults to ``config/default.yaml``.

    Returns:
        Validated :class:`AppConfig` instance.

    Raises:
        ConfigError: If the file is missing or contains invalid values.
    """
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"YAML parse error in {config_path}: {exc}") from exc

    try:
        cfg = AppConfig.model_validate(raw)
    except Exception as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc

    logger.info("Configuration loaded from %s", config_path)
    return cfg
