"""Tests for the per-minute rate limiter and its SQL counter store."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from synthgate.database import Base
from synthgate.models.rate_limit import RateLimitWindow
from synthgate.services.counter_store import SqlCounterStore
from synthgate.services.options import OptionStore
from synthgate.services.rate_limiter import RateLimiter, utcnow, window_start_for

CLIENT = "ip_203.0.113.5"


class TestWindowStart:
    def test_truncates_to_minute(self):
        moment = datetime(2026, 10, 19, 10, 0, 45, 123456, tzinfo=timezone.utc)
        assert window_start_for(moment) == datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)

    def test_converts_to_utc(self):
        offset = timezone(timedelta(hours=2))
        moment = datetime(2026, 10, 19, 12, 5, 30, tzinfo=offset)
        assert window_start_for(moment) == datetime(2026, 10, 19, 10, 5, tzinfo=timezone.utc)

    def test_uses_current_time(self, frozen_time):
        with frozen_time("2026-10-19 10:00:59"):
            assert window_start_for(utcnow()) == datetime(
                2026, 10, 19, 10, 0, tzinfo=timezone.utc
            )


class TestSqlCounterStore:
    async def test_missing_window_counts_zero(self, db_session: AsyncSession, clock):
        store = SqlCounterStore(db_session)
        assert await store.get(CLIENT, window_start_for(clock())) == 0

    async def test_upsert_inserts_then_increments(self, db_session: AsyncSession, clock):
        store = SqlCounterStore(db_session)
        window = window_start_for(clock())

        assert await store.upsert_increment(CLIENT, window) == 1
        assert await store.upsert_increment(CLIENT, window) == 2
        assert await store.upsert_increment(CLIENT, window) == 3
        assert await store.get(CLIENT, window) == 3

        rows = await db_session.execute(select(func.count()).select_from(RateLimitWindow))
        assert rows.scalar_one() == 1

    async def test_windows_are_separate_rows(self, db_session: AsyncSession, clock):
        store = SqlCounterStore(db_session)
        first = window_start_for(clock())
        second = first + timedelta(minutes=1)

        await store.upsert_increment(CLIENT, first)
        await store.upsert_increment(CLIENT, second)

        assert await store.get(CLIENT, first) == 1
        assert await store.get(CLIENT, second) == 1


class TestRateLimiter:
    async def test_admits_up_to_ceiling(self, db_session: AsyncSession, clock):
        limiter = RateLimiter(SqlCounterStore(db_session), ceiling=5, clock=clock)
        results = [await limiter.check(CLIENT) for _ in range(5)]
        assert results == [True] * 5

    async def test_rejects_beyond_ceiling_without_incrementing(
        self, db_session: AsyncSession, clock
    ):
        store = SqlCounterStore(db_session)
        limiter = RateLimiter(store, ceiling=5, clock=clock)

        results = [await limiter.check(CLIENT) for _ in range(8)]

        assert results.count(True) == 5
        assert results[5:] == [False, False, False]
        assert await store.get(CLIENT, window_start_for(clock())) == 5

    async def test_scenario_ceiling_three(self, db_session: AsyncSession, clock):
        limiter = RateLimiter(SqlCounterStore(db_session), ceiling=3, clock=clock)
        outcomes = []
        for moment in ("10:00:01", "10:00:15", "10:00:45", "10:00:50"):
            clock.set(f"2026-10-19T{moment}")
            outcomes.append(await limiter.check(CLIENT))
        assert outcomes == [True, True, True, False]

    async def test_next_window_is_independent(self, db_session: AsyncSession, clock):
        limiter = RateLimiter(SqlCounterStore(db_session), ceiling=2, clock=clock)

        assert [await limiter.check(CLIENT) for _ in range(3)] == [True, True, False]

        clock.advance(minutes=1)
        assert [await limiter.check(CLIENT) for _ in range(3)] == [True, True, False]

    async def test_clients_are_counted_separately(self, db_session: AsyncSession, clock):
        limiter = RateLimiter(SqlCounterStore(db_session), ceiling=1, clock=clock)

        assert await limiter.check(CLIENT)
        assert not await limiter.check(CLIENT)
        assert await limiter.check("ip_198.51.100.7")

    def test_ceiling_must_be_positive(self, clock):
        with pytest.raises(ValueError):
            RateLimiter(store=None, ceiling=0, clock=clock)

    async def test_cleanup_removes_windows_older_than_a_day(
        self, db_session: AsyncSession, clock
    ):
        store = SqlCounterStore(db_session)
        limiter = RateLimiter(store, clock=clock)
        now = window_start_for(clock())

        await store.upsert_increment(CLIENT, now - timedelta(hours=25))
        await store.upsert_increment(CLIENT, now - timedelta(hours=23))
        await store.upsert_increment(CLIENT, now)

        assert await limiter.cleanup() == 1
        assert await store.get(CLIENT, now - timedelta(hours=25)) == 0
        assert await store.get(CLIENT, now - timedelta(hours=23)) == 1
        assert await store.get(CLIENT, now) == 1


@pytest_asyncio.fixture
async def file_sessions(tmp_path):
    """Session factory on a file database so each session gets its own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'counters.db'}", connect_args={"timeout": 30}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


class TestConcurrentRequests:
    async def test_parallel_checks_lose_no_increments(self, file_sessions, clock):
        async def one_request() -> bool:
            async with file_sessions() as session:
                limiter = RateLimiter(SqlCounterStore(session), ceiling=1000, clock=clock)
                return await limiter.check(CLIENT)

        results = await asyncio.gather(*(one_request() for _ in range(25)))

        async with file_sessions() as session:
            stored = await SqlCounterStore(session).get(CLIENT, window_start_for(clock()))
        assert all(results)
        assert stored == results.count(True) == 25


class TestRateLimitOption:
    async def test_default_when_unset(self, db_session: AsyncSession):
        assert await OptionStore(db_session).get_rate_limit(100) == 100

    async def test_stored_override(self, db_session: AsyncSession):
        options = OptionStore(db_session)
        await options.set_rate_limit(7)
        await options.set_rate_limit(9)
        assert await options.get_rate_limit(100) == 9

    async def test_invalid_stored_value_falls_back(self, db_session: AsyncSession):
        options = OptionStore(db_session)
        await options.set("rate_limit", "lots")
        assert await options.get_rate_limit(100) == 100

    async def test_rejects_non_positive(self, db_session: AsyncSession):
        with pytest.raises(ValueError):
            await OptionStore(db_session).set_rate_limit(0)
