"""Pydantic schemas for request/response validation."""

from synthgate.schemas.admin import (
    CleanupResponse,
    RegenerateKeyResponse,
    SiteSettingsResponse,
    UpdateSiteSettingsRequest,
)
from synthgate.schemas.errors import ErrorResponse
from synthgate.schemas.status import PayloadCheckResponse, StatusResponse

__all__ = [
    "CleanupResponse",
    "RegenerateKeyResponse",
    "SiteSettingsResponse",
    "UpdateSiteSettingsRequest",
    "ErrorResponse",
    "PayloadCheckResponse",
    "StatusResponse",
]
