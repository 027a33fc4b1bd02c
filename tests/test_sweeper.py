"""Background expiry sweeper tests."""

import asyncio
import contextlib
from unittest.mock import MagicMock

import pytest

from shortlinks.store import LinkStore
from shortlinks.sweeper import run_expiry_sweeper, sweep_once

from conftest import FakeClock


def test_sweep_once_removes_expired(store: LinkStore, clock: FakeClock) -> None:
    logger = MagicMock()
    store.create("https://keep.example.com")
    store.create("https://gone.example.com", ttl_hours=1)
    clock.advance(hours=2)

    assert sweep_once(store, logger) == 1
    assert len(store) == 1
    logger.info.assert_called_once()


def test_sweep_once_nothing_to_do(store: LinkStore) -> None:
    logger = MagicMock()
    store.create("https://keep.example.com")

    assert sweep_once(store, logger) == 0
    logger.info.assert_not_called()


@pytest.mark.asyncio
async def test_run_expiry_sweeper_evicts_in_background(store: LinkStore, clock: FakeClock) -> None:
    logger = MagicMock()
    store.create("https://gone.example.com", ttl_hours=1)
    clock.advance(hours=2)

    task = asyncio.create_task(run_expiry_sweeper(store, logger, interval_seconds=0.01))
    for _ in range(100):
        await asyncio.sleep(0.01)
        if len(store) == 0:
            break
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task

    assert len(store) == 0
