from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    client_id: str = Field(..., alias="AMADEUS_CLIENT_ID")
    client_secret: str = Field(..., alias="AMADEUS_CLIENT_SECRET")
    test_env: bool = Field(False, alias="AMADEUS_TEST_ENV")
    currency: str = Field("EUR", alias="DEFAULT_CURRENCY")
    max_results: int = Field(10, alias="MAX_RESULTS")
    request_timeout_s: Optional[float] = Field(15.0, alias="REQUEST_TIMEOUT_S")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("client_id", "client_secret")
    @classmethod
    def _credential_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError(
                "AMADEUS_CLIENT_ID and AMADEUS_CLIENT_SECRET must be non-empty"
            )
        return v.strip()

    @field_validator("max_results")
    @classmethod
    def _max_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_RESULTS must be greater than 0")
        return v

    @field_validator("currency")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
