"""Site management schemas."""

from pydantic import BaseModel, Field


class RegenerateKeyResponse(BaseModel):
    """Response after regenerating the site API key."""

    api_key: str  # Plaintext key - shown once, the previous key no longer works


class SiteSettingsResponse(BaseModel):
    """Current gate settings."""

    rate_limit: int
    api_key_configured: bool


class UpdateSiteSettingsRequest(BaseModel):
    """Request to change the per-minute rate limit."""

    rate_limit: int = Field(ge=1)


class CleanupResponse(BaseModel):
    """Result of the rate limit window sweep."""

    deleted: int
