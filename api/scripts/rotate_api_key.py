"""Regenerate the site API key and print it once."""

from __future__ import annotations

import asyncio

from synthgate.database import AsyncSessionLocal, engine
from synthgate.services.options import ApiKeyStore


async def run() -> str:
    async with AsyncSessionLocal() as session:
        new_key = await ApiKeyStore.for_session(session).rotate_key()
    await engine.dispose()
    return new_key


def main() -> int:
    new_key = asyncio.run(run())
    print("New API key (the previous key no longer works):")
    print(new_key)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
