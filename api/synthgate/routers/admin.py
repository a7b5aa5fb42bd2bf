"""Admin router for site key and rate limit management."""

from datetime import timedelta

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from synthgate.auth.dependencies import require_admin
from synthgate.config import settings
from synthgate.database import get_db
from synthgate.middleware.rate_limit import limiter
from synthgate.schemas.admin import (
    CleanupResponse,
    RegenerateKeyResponse,
    SiteSettingsResponse,
    UpdateSiteSettingsRequest,
)
from synthgate.services.counter_store import SqlCounterStore
from synthgate.services.options import ApiKeyStore, OptionStore
from synthgate.services.rate_limiter import RateLimiter

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


@router.post(
    "/api-key/regenerate",
    response_model=RegenerateKeyResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(settings.api_key_regenerate_rate_limit)
async def regenerate_api_key(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> RegenerateKeyResponse:
    """
    Replace the site API key.

    Returns the new plaintext key. The previous key is rejected from the
    next request on; there is no grace period.
    """
    new_key = await ApiKeyStore.for_session(db).rotate_key()
    return RegenerateKeyResponse(api_key=new_key)


@router.get("/settings", response_model=SiteSettingsResponse)
async def get_site_settings(db: AsyncSession = Depends(get_db)) -> SiteSettingsResponse:
    """Return the effective rate limit and whether a key is configured."""
    options = OptionStore(db)
    return SiteSettingsResponse(
        rate_limit=await options.get_rate_limit(settings.rate_limit_per_minute),
        api_key_configured=bool(await ApiKeyStore(options).get_current_key()),
    )


@router.patch("/settings", response_model=SiteSettingsResponse)
async def update_site_settings(
    data: UpdateSiteSettingsRequest,
    db: AsyncSession = Depends(get_db),
) -> SiteSettingsResponse:
    """Change the per-minute rate limit. Applies from the next request."""
    options = OptionStore(db)
    await options.set_rate_limit(data.rate_limit)
    return SiteSettingsResponse(
        rate_limit=data.rate_limit,
        api_key_configured=bool(await ApiKeyStore(options).get_current_key()),
    )


@router.post("/maintenance/cleanup", response_model=CleanupResponse)
async def cleanup_rate_limits(db: AsyncSession = Depends(get_db)) -> CleanupResponse:
    """Delete rate limit windows older than the retention period."""
    rate_limiter = RateLimiter(SqlCounterStore(db))
    deleted = await rate_limiter.cleanup(timedelta(hours=settings.rate_limit_retention_hours))
    return CleanupResponse(deleted=deleted)
