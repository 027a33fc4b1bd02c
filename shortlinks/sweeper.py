"""Optional background sweep of expired links.

Expiry is lazy by default: an expired record stays in memory until a point
lookup observes it. When ``SWEEP_INTERVAL_SECONDS`` is positive the
application lifespan runs :func:`run_expiry_sweeper` to bound that growth.
"""

import asyncio
import logging

from prometheus_client import Counter

from shortlinks.store import LinkStore

__all__ = ["sweep_once", "run_expiry_sweeper"]

SWEEPER_EVICTIONS_TOTAL = Counter(
    "shortlinks_sweeper_evictions_total",
    "Expired links removed by the background sweeper",
)


def sweep_once(store: LinkStore, logger: logging.Logger) -> int:
    evicted = store.evict_expired()
    if evicted:
        SWEEPER_EVICTIONS_TOTAL.inc(evicted)
        logger.info(f"Expiry sweep evicted {evicted} links, {len(store)} remaining")
    return evicted


async def run_expiry_sweeper(store: LinkStore, logger: logging.Logger, interval_seconds: float) -> None:
    """Sweep every ``interval_seconds`` until cancelled."""
    assert interval_seconds > 0, f"interval_seconds must be positive, got {interval_seconds!r}"
    logger.info(f"Starting expiry sweeper every {interval_seconds}s")

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            sweep_once(store, logger)
        except Exception as e:
            logger.error(f"Expiry sweep error: {e}")
