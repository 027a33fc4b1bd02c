"""Dependency injection with an application-owned service manager.

This module provides a centralized way to inject the link store, settings and
logger into API endpoints. The service manager is created by the application
factory and attached to ``app.state``, so every app instance (and every test)
owns an isolated store.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request

from shortlinks.codes import make_code_generator
from shortlinks.config import Settings
from shortlinks.store import LinkStore
from shortlinks.url_service import LinkShorteningService

LOGGER_NAME = "shortlinks"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ============================================================================
# SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Shared resources for one application instance.

    Holds the resources that don't need to be created per request: the
    settings, the configured logger and the link store itself.
    """

    def __init__(self, settings: Settings, store: Optional[LinkStore] = None) -> None:
        self.settings = settings
        self.logger = self._setup_logger()
        self.store = store if store is not None else self._setup_store()

    def _setup_logger(self) -> logging.Logger:
        """Setup logger once."""
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(LOG_FORMAT)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(self.settings.LOG_LEVEL.upper())
        return logger

    def _setup_store(self) -> LinkStore:
        """Create the application's link store."""
        return LinkStore(
            code_generator=make_code_generator(self.settings.SHORT_CODE_LENGTH),
            max_generation_attempts=self.settings.MAX_GENERATION_ATTEMPTS,
        )


# ============================================================================
# LIGHTWEIGHT REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Request context with tracking and shared resource access.

    Attributes:
        service_manager: Application service manager with shared resources
        request_id: Unique identifier for this request
        trace_id: Correlation ID for distributed tracing
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
        tags: Request tags for categorization
    """

    service_manager: ServiceManager
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    trace_id: Optional[str] = None
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())
    tags: list[str] = field(default_factory=list)

    @property
    def store(self) -> LinkStore:
        """Get the application's link store."""
        return self.service_manager.store

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Get shared logger with request context."""
        return logging.LoggerAdapter(
            self.service_manager.logger,
            {
                "request_id": self.request_id,
                "trace_id": self.trace_id or self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
                "tags": ",".join(self.tags),
            },
        )

    @property
    def settings(self) -> Settings:
        """Get shared settings."""
        return self.service_manager.settings

    def add_tag(self, tag: str) -> None:
        """Add a tag to the request context."""
        if tag not in self.tags:
            self.tags.append(tag)

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_service_manager(request: Request) -> ServiceManager:
    """Get the service manager owned by the running application."""
    return request.app.state.service_manager


def get_request_context(
    request: Request,
    manager: ServiceManager = Depends(get_service_manager),
) -> RequestContext:
    """Build the request context from client information and headers."""
    client_ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    trace_id = request.headers.get("x-trace-id")

    return RequestContext(
        service_manager=manager,
        trace_id=trace_id,
        user_agent=user_agent,
        client_ip=client_ip,
    )


def get_link_service(ctx: RequestContext = Depends(get_request_context)) -> LinkShorteningService:
    """Create the link service for this request."""
    return LinkShorteningService.from_context(ctx)
