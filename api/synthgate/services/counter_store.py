"""SQL-backed counter store for rate limit windows."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from synthgate.database import upsert_insert
from synthgate.models.rate_limit import RateLimitWindow


class SqlCounterStore:
    """Per-client, per-window request counters kept in ``rate_limit_windows``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, client_id: str, window_start: datetime) -> int:
        result = await self.db.execute(
            select(RateLimitWindow.request_count)
            .where(RateLimitWindow.client_id == client_id)
            .where(RateLimitWindow.window_start == window_start)
        )
        return result.scalar_one_or_none() or 0

    async def upsert_increment(self, client_id: str, window_start: datetime) -> int:
        """
        Insert the window at count 1 or bump the existing row, atomically.

        Committed immediately so concurrent workers observe the new count.
        """
        table = RateLimitWindow.__table__
        stmt = upsert_insert(self.db, table).values(
            client_id=client_id,
            window_start=window_start,
            request_count=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["client_id", "window_start"],
            set_={"request_count": table.c.request_count + 1},
        ).returning(table.c.request_count)
        result = await self.db.execute(stmt)
        count = result.scalar_one()
        await self.db.commit()
        return count

    async def delete_older_than(self, cutoff: datetime) -> int:
        """Remove windows that started before ``cutoff``; returns rows deleted."""
        result = await self.db.execute(
            delete(RateLimitWindow).where(RateLimitWindow.window_start < cutoff)
        )
        await self.db.commit()
        return result.rowcount or 0
