"""Shared enums for the short-link service.

This module defines all status and state enums used across the codebase.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["HealthStatus", "LinkStatus", "RequestStatus"]


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"


class LinkStatus(StrEnum):
    """Expiry classification of a stored link at read time."""

    ACTIVE = "active"
    EXPIRED = "expired"


class RequestStatus(StrEnum):
    """Outcome labels for request metrics."""

    SUCCESS = "success"
    CONFLICT = "conflict"
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    ERROR = "error"
