"""Fail if the database is behind Alembic head or drifts from the models."""

from __future__ import annotations

import asyncio

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy.ext.asyncio import create_async_engine

from synthgate import models  # noqa: F401  # Ensure models are registered
from synthgate.config import settings
from synthgate.database import Base, _alembic_config


def _inspect(connection) -> tuple[str | None, list[object]]:
    context = MigrationContext.configure(connection, opts={"compare_type": True})
    return context.get_current_revision(), compare_metadata(context, Base.metadata)


async def main() -> int:
    head = ScriptDirectory.from_config(_alembic_config()).get_current_head()

    engine = create_async_engine(settings.database_url)
    async with engine.connect() as conn:
        current, diffs = await conn.run_sync(_inspect)
    await engine.dispose()

    status = 0
    if current != head:
        print(f"Database is at revision {current!r}, expected head {head!r}.")
        status = 1

    if diffs:
        print("Detected schema differences between models and database:")
        for diff in diffs:
            print(diff)
        status = 1

    if status == 0:
        print("Database matches migration head and models.")
    return status


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
