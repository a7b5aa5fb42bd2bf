"""Delete expired rate limit windows. Intended to run from a daily cron job."""

from __future__ import annotations

import argparse
import asyncio
from datetime import timedelta

from synthgate.config import settings
from synthgate.database import AsyncSessionLocal, engine
from synthgate.services.counter_store import SqlCounterStore
from synthgate.services.rate_limiter import RateLimiter


async def run(retention_hours: int) -> int:
    async with AsyncSessionLocal() as session:
        rate_limiter = RateLimiter(SqlCounterStore(session))
        deleted = await rate_limiter.cleanup(timedelta(hours=retention_hours))
    await engine.dispose()
    return deleted


def main() -> int:
    parser = argparse.ArgumentParser(description="Delete old rate limit windows")
    parser.add_argument(
        "--retention-hours",
        type=int,
        default=settings.rate_limit_retention_hours,
        help="Keep windows newer than this many hours (default: %(default)s)",
    )
    args = parser.parse_args()

    deleted = asyncio.run(run(args.retention_hours))
    print(f"Deleted {deleted} rate limit window(s).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
