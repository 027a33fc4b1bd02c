"""Overview statistics over every stored link.

The aggregation works on the raw listing, so records that expired but were
not yet evicted still count, classified as expired at the instant ``now``.
"""

import datetime
from collections.abc import Iterable
from dataclasses import dataclass, field

from shortlinks.enums import LinkStatus
from shortlinks.models import LinkRecord

__all__ = ["OverviewStatistics", "summarize_links"]


@dataclass
class OverviewStatistics:
    total_links: int = 0
    total_clicks: int = 0
    active_links: int = 0
    expired_links: int = 0
    custom_links: int = 0
    recent_links: list[LinkRecord] = field(default_factory=list)


def summarize_links(
    records: Iterable[LinkRecord],
    now: datetime.datetime,
    recent_limit: int = 10,
) -> OverviewStatistics:
    assert recent_limit >= 0, f"recent_limit must be non-negative, got {recent_limit!r}"
    records = list(records)
    stats = OverviewStatistics(total_links=len(records))

    for record in records:
        stats.total_clicks += record.click_count
        if record.status(now) is LinkStatus.EXPIRED:
            stats.expired_links += 1
        else:
            stats.active_links += 1
        if record.is_custom_code:
            stats.custom_links += 1

    newest_first = sorted(records, key=lambda record: record.created_at, reverse=True)
    stats.recent_links = newest_first[:recent_limit]
    return stats
