"""In-memory models for the short-link store.

This module defines the record held for every short code together with the
clock helpers used to classify it as live or expired.

Data Model Layout
=================
::
    LinkRecord
    ├─ code: str (map key, unique among live records)
    ├─ target_url: str
    ├─ click_count: int (starts at 0, never decreases)
    ├─ created_at: datetime (UTC)
    ├─ last_accessed_at: datetime | None (set on each successful resolve)
    ├─ expires_at: datetime | None (None never expires)
    └─ is_custom_code: bool

How to Use
===========
**Step 1 — Check expiry at a given instant**::
    record.is_expired(utcnow())

**Step 2 — Hand out a snapshot**::
    snapshot = record.snapshot()

Key Behaviours
===============
- A record is expired once expires_at <= now; expiry is evaluated at read time.
- Only the store mutates click_count and last_accessed_at; callers get copies.

Classes:
    LinkRecord:  State of one short code.
"""

import dataclasses
import datetime
from collections.abc import Callable
from dataclasses import dataclass

from shortlinks.enums import LinkStatus

__all__ = ["Clock", "LinkRecord", "utcnow"]

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass
class LinkRecord:
    code: str
    target_url: str
    created_at: datetime.datetime
    expires_at: datetime.datetime | None = None
    is_custom_code: bool = False
    click_count: int = 0
    last_accessed_at: datetime.datetime | None = None

    def is_expired(self, now: datetime.datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def status(self, now: datetime.datetime) -> LinkStatus:
        return LinkStatus.EXPIRED if self.is_expired(now) else LinkStatus.ACTIVE

    def snapshot(self) -> "LinkRecord":
        return dataclasses.replace(self)

    def __repr__(self) -> str:
        return f"<LinkRecord(code='{self.code}', clicks={self.click_count}, custom={self.is_custom_code})>"
