"""Site option storage: the API key and the runtime rate limit override."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from synthgate.auth.api_key import generate_api_key
from synthgate.database import upsert_insert
from synthgate.models.option import SiteOption

API_KEY_OPTION = "api_key"
RATE_LIMIT_OPTION = "rate_limit"


class OptionStore:
    """Named settings persisted in ``site_options``."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, name: str) -> str | None:
        result = await self.db.execute(select(SiteOption.value).where(SiteOption.name == name))
        return result.scalar_one_or_none()

    async def set(self, name: str, value: str) -> None:
        table = SiteOption.__table__
        stmt = upsert_insert(self.db, table).values(
            name=name, value=value, updated_at=func.now()
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={"value": stmt.excluded["value"], "updated_at": func.now()},
        )
        await self.db.execute(stmt)
        await self.db.commit()

    async def get_rate_limit(self, default: int) -> int:
        """Stored per-minute ceiling, falling back to ``default`` when unset or invalid."""
        raw = await self.get(RATE_LIMIT_OPTION)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            return default
        return value if value > 0 else default

    async def set_rate_limit(self, value: int) -> None:
        if value < 1:
            raise ValueError("Rate limit must be a positive integer")
        await self.set(RATE_LIMIT_OPTION, str(value))


class ApiKeyStore:
    """The single active site API key. Setting a key replaces the previous one."""

    def __init__(self, options: OptionStore):
        self.options = options

    @classmethod
    def for_session(cls, db: AsyncSession) -> "ApiKeyStore":
        return cls(OptionStore(db))

    async def get_current_key(self) -> str | None:
        return await self.options.get(API_KEY_OPTION)

    async def set_current_key(self, key: str) -> None:
        await self.options.set(API_KEY_OPTION, key)

    async def rotate_key(self) -> str:
        """Generate and store a new key. The old key stops working immediately."""
        new_key = generate_api_key()
        await self.set_current_key(new_key)
        return new_key

    async def ensure_key(self) -> bool:
        """Create a key if none exists. Returns True when one was generated."""
        if await self.get_current_key():
            return False
        await self.rotate_key()
        return True
