"""Pydantic schemas for request/response validation in the short-link service.

This module defines Pydantic models for API input validation and output serialization,
ensuring type safety and automatic OpenAPI documentation generation.

Schema Hierarchy
=================
::
    ShortenRequest (Input)
    ├─ url: str (validated absolute URL)
    ├─ custom_code: str | None ([A-Za-z0-9_-], not reserved)
    └─ expiry_hours: float | None (positive, finite, bounded)

    ShortenResponse (Output)
    ├─ short_code / short_url / original_url
    ├─ clicks: int
    ├─ created_at / expires_at
    └─ is_custom_code: bool

    LinkStats (Output)
    └─ ShortenResponse fields + last_accessed_at, is_expired

    OverviewStats (Output)
    ├─ total_links / total_clicks
    ├─ active_links / expired_links / custom_links
    └─ recent_links: list[RecentLink]

    QRCodeResponse, DeleteResponse, HealthResponse (Output)

How to Use
===========
**Step 1 — Input validation**::
    @router.post("/api/shorten")
    async def shorten_url(payload: ShortenRequest):
        # payload is already validated
        ...

**Step 2 — Response serialization**::
    return LinkStats.from_record(record, base_url, now)

Key Behaviours
===============
- URL validation uses the validators library for RFC compliance.
- Custom codes may contain letters, digits, hyphens and underscores.
- Custom codes that collide with route prefixes are rejected.
- All datetime fields are timezone-aware UTC.
"""

import datetime
import math

import validators
from pydantic import BaseModel, field_validator

from shortlinks.codes import CUSTOM_CODE_PATTERN, RESERVED_CODES
from shortlinks.config import get_settings
from shortlinks.enums import HealthStatus
from shortlinks.models import LinkRecord
from shortlinks.stats import OverviewStatistics
from shortlinks.store import MAX_TTL_HOURS

__all__ = [
    "ShortenRequest",
    "ShortenResponse",
    "LinkStats",
    "RecentLink",
    "OverviewStats",
    "QRCodeResponse",
    "DeleteResponse",
    "HealthResponse",
]


def build_short_url(base_url: str, code: str) -> str:
    return f"{base_url.rstrip('/')}/{code}"


class ShortenRequest(BaseModel):
    url: str
    custom_code: str | None = None
    expiry_hours: float | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v:
            raise ValueError("URL is required")
        if not validators.url(v):
            raise ValueError("Invalid URL format")
        return v

    @field_validator("custom_code")
    @classmethod
    def validate_custom_code(cls, v: str | None) -> str | None:
        if v is not None:
            max_length = get_settings().CUSTOM_CODE_MAX_LENGTH
            if not CUSTOM_CODE_PATTERN.match(v):
                raise ValueError("Custom code can only contain letters, numbers, hyphens, and underscores")
            if len(v) > max_length:
                raise ValueError(f"Custom code must be at most {max_length} characters")
            if v.lower() in RESERVED_CODES:
                raise ValueError(f"Custom code '{v}' is reserved")
        return v

    @field_validator("expiry_hours")
    @classmethod
    def validate_expiry_hours(cls, v: float | None) -> float | None:
        if v is not None:
            if not math.isfinite(v) or v <= 0:
                raise ValueError("Expiry hours must be a positive number")
            if v > MAX_TTL_HOURS:
                raise ValueError(f"Expiry hours must be at most {MAX_TTL_HOURS}")
        return v


class ShortenResponse(BaseModel):
    short_code: str
    short_url: str
    original_url: str
    clicks: int
    created_at: datetime.datetime
    expires_at: datetime.datetime | None = None
    is_custom_code: bool

    @classmethod
    def from_record(cls, record: LinkRecord, base_url: str) -> "ShortenResponse":
        return cls(
            short_code=record.code,
            short_url=build_short_url(base_url, record.code),
            original_url=record.target_url,
            clicks=record.click_count,
            created_at=record.created_at,
            expires_at=record.expires_at,
            is_custom_code=record.is_custom_code,
        )


class LinkStats(BaseModel):
    short_code: str
    short_url: str
    original_url: str
    clicks: int
    created_at: datetime.datetime
    last_accessed_at: datetime.datetime | None = None
    expires_at: datetime.datetime | None = None
    is_custom_code: bool
    is_expired: bool

    @classmethod
    def from_record(cls, record: LinkRecord, base_url: str, now: datetime.datetime) -> "LinkStats":
        return cls(
            short_code=record.code,
            short_url=build_short_url(base_url, record.code),
            original_url=record.target_url,
            clicks=record.click_count,
            created_at=record.created_at,
            last_accessed_at=record.last_accessed_at,
            expires_at=record.expires_at,
            is_custom_code=record.is_custom_code,
            is_expired=record.is_expired(now),
        )


class RecentLink(BaseModel):
    short_code: str
    original_url: str
    clicks: int
    created_at: datetime.datetime
    last_accessed_at: datetime.datetime | None = None
    is_custom_code: bool


class OverviewStats(BaseModel):
    total_links: int
    total_clicks: int
    active_links: int
    expired_links: int
    custom_links: int
    recent_links: list[RecentLink]

    @classmethod
    def from_statistics(cls, stats: OverviewStatistics) -> "OverviewStats":
        return cls(
            total_links=stats.total_links,
            total_clicks=stats.total_clicks,
            active_links=stats.active_links,
            expired_links=stats.expired_links,
            custom_links=stats.custom_links,
            recent_links=[
                RecentLink(
                    short_code=record.code,
                    original_url=record.target_url,
                    clicks=record.click_count,
                    created_at=record.created_at,
                    last_accessed_at=record.last_accessed_at,
                    is_custom_code=record.is_custom_code,
                )
                for record in stats.recent_links
            ],
        )


class QRCodeResponse(BaseModel):
    short_code: str
    short_url: str
    qr_code_url: str


class DeleteResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: HealthStatus
    links: int
