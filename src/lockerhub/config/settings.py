"""
Application settings (Pydantic).

Settings are loaded from `src/lockerhub/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `LOCKERHUB_API_BASE_URL`, `LOCKERHUB_ENV`)
- an external YAML file via `LOCKERHUB_CONFIG_PATH`

Design rule:
- Tuning knobs (API origin, zoom deltas, rental limits, search radius) live in YAML,
  not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from lockerhub.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _as_mapping(text: str, source: str) -> dict[str, Any]:
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{source}: expected a YAML mapping at the top level.")
    return data


def _load_yaml(filename: str, path: str | Path | None = None) -> dict[str, Any]:
    """Load `path` from disk if given, else `filename` packaged in `lockerhub.config`."""
    if path is not None:
        return _as_mapping(Path(path).read_text(encoding="utf-8"), str(path))
    packaged = resources.files("lockerhub.config").joinpath(filename)
    return _as_mapping(packaged.read_text(encoding="utf-8"), filename)


class AppSettings(BaseModel):
    name: str = "LockerHub"
    environment: Literal["development", "production"] = "development"
    timezone: str = "America/New_York"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class ApiSettings(BaseModel):
    base_url: str = "http://localhost:3002"


class MapPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class MapDelta(BaseModel):
    latitude: float = Field(0.0922, gt=0)
    longitude: float = Field(0.0421, gt=0)


class MapSettings(BaseModel):
    provider_api_key: str | None = None
    default_center: MapPoint = Field(default_factory=lambda: MapPoint(lat=33.7490, lon=-84.3880))
    metro_delta: MapDelta = Field(default_factory=MapDelta)
    padding_factor: float = Field(2.5, gt=0)
    min_delta: float = Field(0.05, gt=0)


class BookingSettings(BaseModel):
    max_rental_hours: int = Field(10, ge=1)
    buffer_minutes: int = Field(15, ge=0)
    cancel_cutoff_minutes: int = Field(60, ge=0)


class SearchSettings(BaseModel):
    radius_km: float = Field(40, gt=0)


class FallbackLocation(BaseModel):
    latitude: float = 33.7490
    longitude: float = -84.3880
    accuracy: float | None = 100


class LocationSettings(BaseModel):
    timeout_seconds: float = 10
    production_timeout_seconds: float = 15
    fallback: FallbackLocation = Field(default_factory=FallbackLocation)
    watch_distance_filter_m: float = Field(10, ge=0)
    watch_interval_seconds: float = Field(5, gt=0)


class SessionSettings(BaseModel):
    path: str = ".cache/lockerhub/session.json"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    map: MapSettings = Field(default_factory=MapSettings)
    booking: BookingSettings = Field(default_factory=BookingSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)


# Environment variable -> (section, key). Kept to what deployments actually need to change.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "LOCKERHUB_ENV": ("app", "environment"),
    "LOCKERHUB_LOG_LEVEL": ("app", "log_level"),
    "LOCKERHUB_API_BASE_URL": ("api", "base_url"),
    "LOCKERHUB_MAPS_API_KEY": ("map", "provider_api_key"),
    "LOCKERHUB_SESSION_PATH": ("session", "path"),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay the whitelisted environment variables onto the raw YAML payload."""
    data = {k: dict(v) if isinstance(v, dict) else v for k, v in data.items()}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(var)
        if not value:
            continue
        if var == "LOCKERHUB_ENV":
            value = value.strip().lower()
        data.setdefault(section, {})[key] = value
    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached; call `get_settings.cache_clear()` after env changes)."""
    load_dotenv_if_present()
    raw = _load_yaml("defaults.yaml", os.getenv("LOCKERHUB_CONFIG_PATH") or None)
    return Settings.model_validate(_apply_env_overrides(raw))


@lru_cache
def get_logging_config() -> dict[str, Any]:
    return _load_yaml("logging.yaml")
