# ABOUTME: Settings for the SkyCast session, read from SKYCAST_* environment variables.
# ABOUTME: Loads a .env file first so local overrides work without exporting variables.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from skycast.clock import is_valid_timezone

load_dotenv()


class Settings(BaseModel):
    """Validated runtime configuration."""

    forecast_days: int = Field(default=10, ge=1, le=16)
    default_city: str = "London"
    default_timezone: str = "UTC"
    latency_seconds: float = Field(default=0.0, ge=0.0)
    random_seed: int | None = None
    openrouter_api_key: str = ""
    openrouter_model: str = "anthropic/claude-sonnet-4-5"

    @field_validator("default_timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        if not is_valid_timezone(value):
            raise ValueError(f"not a valid IANA timezone: {value!r}")
        return value


def get_settings() -> Settings:
    """Build Settings from the environment; unset or empty variables keep their defaults."""
    env = {
        "forecast_days": os.environ.get("SKYCAST_FORECAST_DAYS"),
        "default_city": os.environ.get("SKYCAST_DEFAULT_CITY"),
        "default_timezone": os.environ.get("SKYCAST_DEFAULT_TIMEZONE"),
        "latency_seconds": os.environ.get("SKYCAST_LATENCY_SECONDS"),
        "random_seed": os.environ.get("SKYCAST_RANDOM_SEED"),
        "openrouter_api_key": os.environ.get("OPENROUTER_API_KEY"),
        "openrouter_model": os.environ.get("OPENROUTER_MODEL"),
    }
    return Settings(**{key: value.strip() for key, value in env.items() if value and value.strip()})
