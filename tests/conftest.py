"""Shared pytest fixtures for store, service and API tests."""

import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from shortlinks.codes import make_code_generator
from shortlinks.config import Settings
from shortlinks.main import create_app
from shortlinks.store import LinkStore

START_TIME = datetime.datetime(2024, 1, 1, 12, 0, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Controllable clock for expiry tests."""

    def __init__(self, now: datetime.datetime = START_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += datetime.timedelta(**kwargs)


class SequenceGenerator:
    """Code generator returning a fixed sequence of candidates."""

    def __init__(self, codes: list[str]) -> None:
        self._codes = iter(codes)
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return next(self._codes)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> LinkStore:
    return LinkStore(code_generator=make_code_generator(6), clock=clock)


@pytest.fixture
def settings() -> Settings:
    return Settings(BASE_URL="http://test", METRICS_ENABLED=False, SWEEP_INTERVAL_SECONDS=0)


@pytest.fixture
def app(settings: Settings, store: LinkStore) -> FastAPI:
    return create_app(settings, store)


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
