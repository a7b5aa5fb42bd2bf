"""Fixed one-minute window rate limiter."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol

# Matches the historical per-site default.
DEFAULT_RATE_LIMIT = 100
DEFAULT_RETENTION = timedelta(hours=24)


class CounterStore(Protocol):
    async def get(self, client_id: str, window_start: datetime) -> int: ...

    async def upsert_increment(self, client_id: str, window_start: datetime) -> int: ...

    async def delete_older_than(self, cutoff: datetime) -> int: ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Naive timestamps are taken to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def window_start_for(moment: datetime) -> datetime:
    """Truncate a timestamp down to the start of its UTC minute."""
    return as_utc(moment).replace(second=0, microsecond=0)


class RateLimiter:
    """
    Admit at most ``ceiling`` requests per client per minute.

    A request that finds the window already at the ceiling is rejected
    without touching the counter. Otherwise the counter is incremented with
    a single upsert so concurrent requests never lose an update.
    """

    def __init__(
        self,
        store: CounterStore,
        ceiling: int = DEFAULT_RATE_LIMIT,
        clock: Callable[[], datetime] = utcnow,
    ):
        if ceiling < 1:
            raise ValueError("ceiling must be at least 1")
        self.store = store
        self.ceiling = ceiling
        self.clock = clock

    async def check(self, client_id: str) -> bool:
        window_start = window_start_for(self.clock())
        current = await self.store.get(client_id, window_start)
        if current >= self.ceiling:
            return False
        await self.store.upsert_increment(client_id, window_start)
        return True

    async def cleanup(self, retention: timedelta = DEFAULT_RETENTION) -> int:
        """Delete windows older than ``retention``. Safe to run on any schedule."""
        cutoff = as_utc(self.clock()) - retention
        return await self.store.delete_older_than(cutoff)
