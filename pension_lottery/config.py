"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


def resolve_database_url() -> str:
    """Resolve DB connection string for the sql backend.

    Priority:
      1) DATABASE_URL (explicit)
      2) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    return "sqlite:///./pension_lottery.db"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    DATA_BACKEND: str = os.getenv("DATA_BACKEND", "file").lower().strip()  # "file" | "sql"

    # File backend: JSON array of 14-integer rows.
    DATA_FILE: str = os.getenv("DATA_FILE", "./data/PensionLottery.json")

    # SQL backend
    DATABASE_URL: str = resolve_database_url()

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PREDICTION_MAX_COUNT: int = _int_env("PREDICTION_MAX_COUNT", 20)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Configuration used by the test suite."""

    TESTING: bool = True
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
