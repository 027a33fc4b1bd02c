"""FastAPI route definitions for the short-link REST API.

This module provides all HTTP endpoints with dependency injection, error
mapping and response serialization for the short-link service.

API Endpoint Overview
=====================
::
    GET    /health
        └─ HealthResponse (200)

    POST   /api/shorten
        ├─ ShortenRequest (request body)
        └─ ShortenResponse (201) or 409/422/500

    GET    /api/stats
        └─ OverviewStats (200)

    GET    /api/stats/:short_code
        └─ LinkStats (200) or 404

    DELETE /api/delete/:short_code
        └─ DeleteResponse (200) or 404

    GET    /api/qr/:short_code
        └─ QRCodeResponse (200) or 404

    GET    /:short_code
        └─ 302 Redirect or 404 HTML page

Key Behaviours
===============
- CodeAlreadyExists maps to 409, NotFound to 404, GenerationExhausted to 500.
- Expired links are indistinguishable from unknown ones.
- Redirects use 302 so every visit reaches the service and is counted.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from shortlinks.dependencies import RequestContext, get_link_service, get_request_context
from shortlinks.enums import HealthStatus
from shortlinks.exceptions import CodeAlreadyExists, GenerationExhausted, NotFound
from shortlinks.schemas import (
    DeleteResponse,
    HealthResponse,
    LinkStats,
    OverviewStats,
    QRCodeResponse,
    ShortenRequest,
    ShortenResponse,
)
from shortlinks.url_service import LinkShorteningService

__all__ = ["router"]

router = APIRouter()

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <title>Link Not Found</title>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
      body {
        font-family: system-ui, -apple-system, sans-serif;
        display: flex;
        align-items: center;
        justify-content: center;
        min-height: 100vh;
        margin: 0;
        background: #f8fafc;
        color: #334155;
      }
      .container { text-align: center; max-width: 400px; padding: 2rem; }
      h1 { font-size: 2rem; margin-bottom: 1rem; color: #ef4444; }
      p { margin-bottom: 1.5rem; line-height: 1.6; }
      a { color: #3b82f6; text-decoration: none; font-weight: 500; }
      a:hover { text-decoration: underline; }
    </style>
  </head>
  <body>
    <div class="container">
      <h1>Link Not Found</h1>
      <p>The short link you're looking for doesn't exist or has expired.</p>
      <a href="/">&larr; Go back to homepage</a>
    </div>
  </body>
</html>"""


@router.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check(ctx: RequestContext = Depends(get_request_context)) -> HealthResponse:
    links = len(ctx.store)
    ctx.logger.debug(f"Health check completed: {links} links stored")
    return HealthResponse(status=HealthStatus.HEALTHY, links=links)


@router.post("/api/shorten", response_model=ShortenResponse, status_code=201, tags=["links"])
async def shorten_url(
    payload: ShortenRequest,
    ctx: RequestContext = Depends(get_request_context),
    service: LinkShorteningService = Depends(get_link_service),
) -> ShortenResponse:
    ctx.add_tag("link_creation")

    try:
        link = service.create_short_link(payload)
    except CodeAlreadyExists as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except GenerationExhausted as exc:
        raise HTTPException(status_code=500, detail="Internal server error") from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    ctx.logger.info(
        f"Short link created in {ctx.get_duration():.2f}ms: {link.short_code}",
        extra={"operation": "create_short_link", "duration_ms": ctx.get_duration()},
    )
    return link


@router.get("/api/stats", response_model=OverviewStats, tags=["stats"])
async def get_overview_stats(
    service: LinkShorteningService = Depends(get_link_service),
) -> OverviewStats:
    return service.get_overview_statistics()


@router.get("/api/stats/{short_code}", response_model=LinkStats, tags=["stats"])
async def get_stats(
    short_code: str,
    service: LinkShorteningService = Depends(get_link_service),
) -> LinkStats:
    try:
        return service.get_link_statistics(short_code)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Short code not found") from exc


@router.delete("/api/delete/{short_code}", response_model=DeleteResponse, tags=["links"])
async def delete_link(
    short_code: str,
    service: LinkShorteningService = Depends(get_link_service),
) -> DeleteResponse:
    try:
        service.delete_short_link(short_code)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="URL not found") from exc
    return DeleteResponse(message="URL deleted successfully")


@router.get("/api/qr/{short_code}", response_model=QRCodeResponse, tags=["links"])
async def get_qr_code(
    short_code: str,
    service: LinkShorteningService = Depends(get_link_service),
) -> QRCodeResponse:
    try:
        return service.get_qr_code(short_code)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Short code not found") from exc


@router.get("/{short_code}", tags=["redirect"], response_model=None)
async def redirect_to_url(
    short_code: str,
    ctx: RequestContext = Depends(get_request_context),
    service: LinkShorteningService = Depends(get_link_service),
) -> RedirectResponse | HTMLResponse:
    ctx.add_tag("redirect")

    try:
        target_url = service.resolve_short_link(short_code)
    except NotFound:
        return HTMLResponse(content=NOT_FOUND_PAGE, status_code=404)

    ctx.logger.info(
        f"Redirect successful: {short_code} -> {target_url}",
        extra={
            "operation": "redirect",
            "short_code": short_code,
            "user_agent": ctx.user_agent,
            "client_ip": ctx.client_ip,
            "duration_ms": ctx.get_duration(),
        },
    )
    return RedirectResponse(url=target_url, status_code=302)
