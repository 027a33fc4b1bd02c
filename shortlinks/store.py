"""Thread-safe in-memory short-link store.

The store owns every LinkRecord and is the only place that allocates codes,
counts clicks and evicts expired entries.

Flow Diagram — create()
=======================
::
    ┌─────────────┐
    │  create()   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Acquire the │
    │ store lock  │
    └──────┬──────┘
    CUSTOM CODE?  │
    ┌─────┴──────────┐
    │ YES             │ NO
    ▼                 ▼
┌──────────┐    ┌───────────┐
│ Live     │    │ Generate  │◄──┐
│ holder?  │    │ candidate │   │ held by live
│ → raise  │    └─────┬─────┘   │ record, retry
│ CodeAlre-│          └─────────┘ (bounded)
│ adyExists│          │
└────┬─────┘          │
     └──────┬─────────┘
            ▼
    ┌─────────────┐
    │ Insert new  │
    │ LinkRecord  │
    └─────────────┘

Flow Diagram — resolve_and_touch() / get()
==========================================
::
    ┌─────────────┐
    │ Lookup code │
    └──────┬──────┘
    PRESENT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ raise   │  │ Expired?│── YES → evict, raise NotFound
│ NotFound│  └────┬────┘
└─────────┘       ▼ NO
            ┌──────────────┐
            │ touch: clicks│
            │ +1, accessed │ (resolve_and_touch only)
            └──────────────┘

How to Use
===========
**Step 1 — Construct one store per application**::
    store = LinkStore(code_generator=make_code_generator(6))

**Step 2 — Create and resolve**::
    record = store.create("https://example.com", ttl_hours=1)
    target = store.resolve_and_touch(record.code)

**Step 3 — Inspect**::
    store.get(record.code).click_count   # 1
    store.list_all()                      # includes expired, not yet evicted

Key Behaviours
===============
- One lock guards every read and write of the mapping.
- Expired records are evicted lazily by point lookups, never by list_all().
- Records returned to callers are snapshots; the stored record cannot be
  mutated from outside.
- The store performs no logging; callers report failures.

Classes:
    LinkStore:  Mapping of code to LinkRecord with expiry and click tracking.
"""

import datetime
import math
import threading

from shortlinks.codes import CodeGenerator, make_code_generator
from shortlinks.exceptions import CodeAlreadyExists, GenerationExhausted, NotFound
from shortlinks.models import Clock, LinkRecord, utcnow

__all__ = ["DEFAULT_MAX_GENERATION_ATTEMPTS", "MAX_TTL_HOURS", "LinkStore"]

DEFAULT_MAX_GENERATION_ATTEMPTS = 10
MAX_TTL_HOURS = 24 * 365 * 100


class LinkStore:
    def __init__(
        self,
        code_generator: CodeGenerator | None = None,
        clock: Clock = utcnow,
        max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
    ) -> None:
        assert max_generation_attempts > 0, f"max_generation_attempts must be positive, got {max_generation_attempts!r}"
        self._links: dict[str, LinkRecord] = {}
        self._lock = threading.Lock()
        self._generate_code = code_generator or make_code_generator(6)
        self._clock = clock
        self._max_generation_attempts = max_generation_attempts

    def __len__(self) -> int:
        with self._lock:
            return len(self._links)

    def now(self) -> datetime.datetime:
        """Current time as seen by this store's clock."""
        return self._clock()

    def create(
        self,
        target_url: str,
        custom_code: str | None = None,
        ttl_hours: float | None = None,
    ) -> LinkRecord:
        if not target_url:
            raise ValueError("target_url must be a non-empty string")
        if custom_code is not None and not custom_code:
            raise ValueError("custom_code must be a non-empty string when given")
        ttl = self._ttl_delta(ttl_hours) if ttl_hours is not None else None

        with self._lock:
            now = self._clock()
            expires_at = None
            if ttl is not None:
                try:
                    expires_at = now + ttl
                except OverflowError as exc:
                    raise ValueError(f"ttl_hours {ttl_hours!r} puts expiry out of range") from exc

            if custom_code is not None:
                if self._live_record(custom_code, now) is not None:
                    raise CodeAlreadyExists(custom_code)
                code = custom_code
            else:
                code = self._reserve_generated_code(now)

            record = LinkRecord(
                code=code,
                target_url=target_url,
                created_at=now,
                expires_at=expires_at,
                is_custom_code=custom_code is not None,
            )
            self._links[code] = record
            return record.snapshot()

    def resolve_and_touch(self, code: str) -> str:
        with self._lock:
            now = self._clock()
            record = self._live_record(code, now)
            if record is None:
                raise NotFound(code)
            record.click_count += 1
            record.last_accessed_at = now
            return record.target_url

    def get(self, code: str) -> LinkRecord:
        with self._lock:
            record = self._live_record(code, self._clock())
            if record is None:
                raise NotFound(code)
            return record.snapshot()

    def list_all(self) -> list[LinkRecord]:
        with self._lock:
            return [record.snapshot() for record in self._links.values()]

    def delete(self, code: str) -> bool:
        with self._lock:
            return self._links.pop(code, None) is not None

    def evict_expired(self) -> int:
        """Remove every expired record and return how many were dropped."""
        with self._lock:
            now = self._clock()
            expired = [code for code, record in self._links.items() if record.is_expired(now)]
            for code in expired:
                del self._links[code]
            return len(expired)

    @staticmethod
    def _ttl_delta(ttl_hours: float) -> datetime.timedelta:
        if not math.isfinite(ttl_hours) or ttl_hours <= 0:
            raise ValueError(f"ttl_hours must be a positive finite number, got {ttl_hours!r}")
        if ttl_hours > MAX_TTL_HOURS:
            raise ValueError(f"ttl_hours must be at most {MAX_TTL_HOURS}, got {ttl_hours!r}")
        return datetime.timedelta(hours=ttl_hours)

    def _live_record(self, code: str, now: datetime.datetime) -> LinkRecord | None:
        """Return the live record for code, evicting it if expired. Caller holds the lock."""
        record = self._links.get(code)
        if record is None:
            return None
        if record.is_expired(now):
            del self._links[code]
            return None
        return record

    def _reserve_generated_code(self, now: datetime.datetime) -> str:
        """Find a generated code not held by a live record. Caller holds the lock."""
        for _ in range(self._max_generation_attempts):
            code = self._generate_code()
            if self._live_record(code, now) is None:
                return code
        raise GenerationExhausted(self._max_generation_attempts)
