"""Configuration management for the short-link service.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from shortlinks.config import get_settings

**Step 2 — Get settings**::
    settings = get_settings()
    length = settings.SHORT_CODE_LENGTH

**Step 3 — Override for an isolated app**::
    app = create_app(Settings(SWEEP_INTERVAL_SECONDS=60))

Key Behaviours
===============
- Settings are cached after first access for performance.
- Environment variables override defaults automatically.
- SWEEP_INTERVAL_SECONDS of 0 keeps expiry purely lazy (no background task).

Classes:
    Settings:  Pydantic model for all configuration values.

"""

__all__ = ["Settings", "get_settings"]

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "shortlinks"
    APP_ENV: str = "development"
    BASE_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"

    # Short code allocation
    SHORT_CODE_LENGTH: int = 6
    MAX_GENERATION_ATTEMPTS: int = 10
    CUSTOM_CODE_MAX_LENGTH: int = 32

    # Overview statistics
    RECENT_LINKS_LIMIT: int = 10

    # Active expiry sweep, 0 disables it
    SWEEP_INTERVAL_SECONDS: float = 0

    # External QR image service
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    QR_CODE_SIZE: int = 200

    METRICS_ENABLED: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
