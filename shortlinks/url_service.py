"""Short-link Service Layer - Core Business Logic

This module is the caller of the link store: it logs every operation, records
Prometheus metrics and converts store records into API schemas. The store
itself stays silent; every failure is reported from here.

Architecture Overview
==================
::
    ┌─────────────────────────────────────────────────────────────┐
    │                    Service Layer                            │
    │  ┌─────────────────┐  ┌─────────────────┐  ┌──────────────┐ │
    │  │  Link Service   │  │  Overview Stats │  │  QR Builder  │ │
    │  │                 │  │                 │  │              │ │
    │  │ • Create links  │  │ • Active/expired│  │ • External   │ │
    │  │ • Resolve codes │  │ • Click totals  │  │   image URL  │ │
    │  │ • Delete links  │  │ • Recent links  │  │              │ │
    │  └─────────────────┘  └─────────────────┘  └──────────────┘ │
    └─────────────────────────────────────────────────────────────┘
                                 │
                                 ▼
                  ┌─────────────────────────────┐
                  │   LinkStore (in-memory,     │
                  │   single lock, lazy expiry) │
                  └─────────────────────────────┘

Redirect Flow
-------------
::
    ┌─────────────┐
    │  GET /:code │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ resolve_and │
    │ _touch()    │
    └──────┬──────┘
    LIVE?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ NotFound│  │ clicks+1│
│ → 404   │  │ → 302   │
└─────────┘  └─────────┘

Usage Examples
=============
```python
@router.post("/api/shorten")
async def shorten_url(
    payload: ShortenRequest,
    service: LinkShorteningService = Depends(get_link_service),
) -> ShortenResponse:
    return service.create_short_link(payload)
```
"""

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

from shortlinks.enums import RequestStatus
from shortlinks.exceptions import CodeAlreadyExists, GenerationExhausted, NotFound
from shortlinks.qr import build_qr_code_url
from shortlinks.schemas import (
    LinkStats,
    OverviewStats,
    QRCodeResponse,
    ShortenRequest,
    ShortenResponse,
    build_short_url,
)
from shortlinks.stats import summarize_links

if TYPE_CHECKING:
    from shortlinks.dependencies import RequestContext

__all__ = ["LinkShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

LINK_CREATION_REQUESTS_TOTAL = Counter(
    "shortlinks_creation_requests_total",
    "Total short link creation requests",
    ["status"],
)
LINK_CREATION_DURATION = Histogram(
    "shortlinks_creation_duration_seconds",
    "Time taken to create short links",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1],
)
LINK_REDIRECTS_TOTAL = Counter(
    "shortlinks_redirects_total",
    "Total redirect lookups",
    ["status"],
)
LINK_DELETIONS_TOTAL = Counter(
    "shortlinks_deletions_total",
    "Total short link deletions",
    ["status"],
)
GENERATION_EXHAUSTED_TOTAL = Counter(
    "shortlinks_generation_exhausted_total",
    "Times the generated-code retry loop ran out of attempts",
)


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================


class LinkShorteningService:
    """Core service class for short-link operations.

    Wraps one LinkStore with logging, metrics and schema conversion. Domain
    errors from the store are logged and re-raised for the route to map onto
    HTTP status codes.

    Example:
        >>> service = LinkShorteningService.from_context(ctx)
        >>> link = service.create_short_link(ShortenRequest(url="https://example.com"))
        >>> print(f"Shortened: {link.short_code}")
    """

    def __init__(self, ctx: "RequestContext"):
        self._store = ctx.store
        self._logger = ctx.logger
        self._settings = ctx.settings
        self._ctx = ctx

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "LinkShorteningService":
        return cls(ctx)

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    def create_short_link(self, request: ShortenRequest) -> ShortenResponse:
        """Allocate a short code for ``request.url``.

        Raises:
            CodeAlreadyExists: If the custom code is held by a live link.
            GenerationExhausted: If no free generated code was found.
            ValueError: If the store rejects the target, code or expiry.
        """
        start_time = time.perf_counter()
        self._logger.info(f"Creating short link for: {request.url}")

        try:
            record = self._store.create(
                request.url,
                custom_code=request.custom_code,
                ttl_hours=request.expiry_hours,
            )
        except CodeAlreadyExists as exc:
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.CONFLICT).inc()
            self._logger.warning(f"Short link creation failed: {exc}")
            raise
        except GenerationExhausted as exc:
            GENERATION_EXHAUSTED_TOTAL.inc()
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            self._logger.error(
                f"Short link creation error: {exc}",
                extra={"operation": "create_short_link", "attempts": exc.attempts, "links": len(self._store)},
            )
            raise
        except ValueError as exc:
            LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.INVALID).inc()
            self._logger.warning(f"Short link creation rejected: {exc}")
            raise
        finally:
            LINK_CREATION_DURATION.observe(time.perf_counter() - start_time)

        LINK_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(
            f"Short link created: {record.code}",
            extra={
                "operation": "create_short_link",
                "short_code": record.code,
                "custom_code": record.is_custom_code,
                "expires_at": record.expires_at.isoformat() if record.expires_at else None,
            },
        )
        return ShortenResponse.from_record(record, self._settings.BASE_URL)

    def resolve_short_link(self, short_code: str) -> str:
        """Return the target for a redirect and count the click."""
        try:
            target_url = self._store.resolve_and_touch(short_code)
        except NotFound:
            LINK_REDIRECTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.warning(f"Redirect failed - short code not found: {short_code}")
            raise

        LINK_REDIRECTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.debug(f"Click tracked for {short_code}")
        return target_url

    def get_link_statistics(self, short_code: str) -> LinkStats:
        self._logger.info(f"Getting statistics for code: {short_code}")
        try:
            record = self._store.get(short_code)
        except NotFound:
            self._logger.warning(f"Statistics not found for code: {short_code}")
            raise
        return LinkStats.from_record(record, self._settings.BASE_URL, self._store.now())

    def get_overview_statistics(self) -> OverviewStats:
        records = self._store.list_all()
        stats = summarize_links(records, self._store.now(), self._settings.RECENT_LINKS_LIMIT)
        self._logger.info(
            f"Overview statistics computed for {stats.total_links} links",
            extra={
                "operation": "overview_stats",
                "active_links": stats.active_links,
                "expired_links": stats.expired_links,
            },
        )
        return OverviewStats.from_statistics(stats)

    def delete_short_link(self, short_code: str) -> None:
        """Delete a live link.

        Expired links are reported as missing, like links that never existed.
        """
        try:
            self._store.get(short_code)
        except NotFound:
            LINK_DELETIONS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            self._logger.warning(f"Delete failed - short code not found: {short_code}")
            raise

        if not self._store.delete(short_code):
            # Removed concurrently between the lookup and the delete.
            LINK_DELETIONS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            raise NotFound(short_code)

        LINK_DELETIONS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Short link deleted: {short_code}")

    def get_qr_code(self, short_code: str) -> QRCodeResponse:
        record = self._store.get(short_code)
        short_url = build_short_url(self._settings.BASE_URL, record.code)
        return QRCodeResponse(
            short_code=record.code,
            short_url=short_url,
            qr_code_url=build_qr_code_url(
                self._settings.QR_SERVICE_URL,
                short_url,
                self._settings.QR_CODE_SIZE,
            ),
        )
