"""FastAPI application entry point for the short-link service.

This module builds the FastAPI application: it creates the link store owned
by the app, wires middleware and metrics, and runs the optional expiry
sweeper for the lifetime of the process.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │ create_app()│
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Build       │
    │ ServiceMgr  │
    │ + LinkStore │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ CORS, metrics│
    │ and routes  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ sweeper task│ (SWEEP_INTERVAL_SECONDS > 0)
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ cancel task │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn shortlinks.main:app --host 0.0.0.0 --port 8000 --reload

**Step 2 — Make API calls**::
    curl -X POST http://localhost:8000/api/shorten \
         -H "Content-Type: application/json" \
         -d '{"url": "https://example.com", "expiry_hours": 24}'

Key Behaviours
===============
- Each app owns exactly one in-memory LinkStore; nothing is persisted.
- Tests pass their own Settings and LinkStore to create_app().
- Prometheus metrics are exposed at /metrics when METRICS_ENABLED is set.
"""

__all__ = ["app", "create_app"]

import asyncio
import contextlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from shortlinks.config import Settings, get_settings
from shortlinks.dependencies import ServiceManager
from shortlinks.routes import router
from shortlinks.store import LinkStore
from shortlinks.sweeper import run_expiry_sweeper


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    manager: ServiceManager = app.state.service_manager
    interval = manager.settings.SWEEP_INTERVAL_SECONDS
    sweeper: Optional[asyncio.Task] = None

    # Startup
    if interval > 0:
        sweeper = asyncio.create_task(run_expiry_sweeper(manager.store, manager.logger, interval))
    manager.logger.info(f"{manager.settings.APP_NAME} started ({manager.settings.APP_ENV})")
    yield
    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper


def create_app(settings: Optional[Settings] = None, store: Optional[LinkStore] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="In-memory URL shortener with click tracking and expiring links",
        lifespan=lifespan,
    )
    app.state.service_manager = ServiceManager(settings, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.METRICS_ENABLED:
        Instrumentator(
            should_group_status_codes=True,
            should_ignore_untemplated=False,
            should_respect_env_var=False,
        ).instrument(app).expose(app)

    app.include_router(router)
    return app


app = create_app()
