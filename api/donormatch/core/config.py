from __future__ import annotations

import functools

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "Donor Match API"
    environment: str = "development"

    database_url: str = "sqlite+aiosqlite:///./donormatch.db"
    db_echo: bool = False

    # Matches the radius the blood bank search falls back to when none is given
    default_radius_km: float = 10.0
    max_radius_km: float = 50.0

    # CORS configuration
    cors_origins: str = "*"

    rate_limit_default: str = "60/minute"
    rate_limit_storage_uri: str = "memory://"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @field_validator("default_radius_km", "max_radius_km")
    @classmethod
    def validate_positive_radius(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("radius settings must be positive")
        return v

    @field_validator("rate_limit_default")
    @classmethod
    def validate_rate_limit(cls, v: str) -> str:
        count, sep, _ = v.partition("/")
        if not sep or not count.strip().isdigit():
            raise ValueError("rate_limit_default must look like '<count>/<period>'")
        return v

    @model_validator(mode="after")
    def check_radius_bounds(self) -> "Settings":
        if self.default_radius_km > self.max_radius_km:
            raise ValueError(
                f"default_radius_km ({self.default_radius_km}) cannot exceed "
                f"max_radius_km ({self.max_radius_km})"
            )
        return self

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@functools.lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
