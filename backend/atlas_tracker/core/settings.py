import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator


class ServerConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)


class SecurityConfig(BaseModel):
    cors_origins: list[str] = Field(default_factory=list)


class RotationConfig(BaseModel):
    # Lookback presets: short window for picking/guarding sites, long one for stats.
    history_lookback: int = Field(default=20, ge=1, le=500)
    stats_lookback: int = Field(default=50, ge=1, le=500)
    im_min_recovery_hours: int = Field(default=48, ge=0)
    subq_min_recovery_hours: int = Field(default=24, ge=0)
    time_decay_factor: float = Field(default=1.0, gt=0)
    timezone: str = Field(default="UTC")

    @field_validator("timezone")
    def _validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v


class Settings(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    rotation: RotationConfig = Field(default_factory=RotationConfig)


DEFAULT_CONFIG_PATH = Path(os.environ.get("CONFIG_PATH", "config/config.json"))


def _load_file_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as exc:
        raise RuntimeError(f"Invalid JSON configuration at {path}") from exc


def _load_env() -> dict[str, Any]:
    env_config: dict[str, Any] = {}

    host = os.environ.get("SERVER_HOST")
    if host:
        env_config.setdefault("server", {})["host"] = host

    port = os.environ.get("SERVER_PORT")
    if port:
        env_config.setdefault("server", {})["port"] = int(port)

    cors_origins = os.environ.get("CORS_ORIGINS")
    if cors_origins:
        env_config.setdefault("security", {})["cors_origins"] = [
            origin.strip() for origin in cors_origins.split(",") if origin.strip()
        ]

    history_lookback = os.environ.get("ROTATION_HISTORY_LOOKBACK")
    if history_lookback:
        env_config.setdefault("rotation", {})["history_lookback"] = int(history_lookback)

    stats_lookback = os.environ.get("ROTATION_STATS_LOOKBACK")
    if stats_lookback:
        env_config.setdefault("rotation", {})["stats_lookback"] = int(stats_lookback)

    tz_name = os.environ.get("ROTATION_TIMEZONE")
    if tz_name:
        env_config.setdefault("rotation", {})["timezone"] = tz_name

    return env_config


def merge_settings(env_config: dict[str, Any], file_config: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    merged["server"] = {**file_config.get("server", {}), **env_config.get("server", {})}
    merged["security"] = {**file_config.get("security", {}), **env_config.get("security", {})}
    merged["rotation"] = {**file_config.get("rotation", {}), **env_config.get("rotation", {})}
    return merged


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    env_config = _load_env()
    file_config = _load_file_config(DEFAULT_CONFIG_PATH)
    merged = merge_settings(env_config=env_config, file_config=file_config)
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise RuntimeError(f"Configuration error: {exc}") from exc


__all__ = ["RotationConfig", "Settings", "get_settings"]
