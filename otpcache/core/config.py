"""Application configuration powered by pydantic-settings."""

import secrets
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized strongly-typed configuration loaded from `.env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Verification Cache"
    PROJECT_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    OTP_LENGTH: int = Field(6, ge=1, description="Number of digits in an issued code")
    OTP_EXPIRE_SECONDS: int = Field(600, gt=0, description="Lifetime of an issued code")

    OTP_STORE_BACKEND: Literal["memory", "redis"] = "memory"
    # 0 disables the background sweep; expired entries are then only evicted on access
    OTP_SWEEP_INTERVAL_SECONDS: float = Field(60.0, ge=0)

    REDIS_URL: str = Field("redis://localhost:6379/0", description="Redis URL for OTP storage")
    OTP_STORE_TIMEOUT_SECONDS: float = Field(2.0, gt=0, description="Upper bound for a single store call")
    # Shared by every worker using the same Redis; a per-process random key only suits a single worker
    OTP_HASH_SECRET: str = Field(default_factory=lambda: secrets.token_hex(32), description="HMAC key for stored code digests")


@lru_cache
def get_settings() -> Settings:
    """Cache and return a singleton Settings instance to avoid re-parsing env."""
    return Settings()


settings = get_settings()
