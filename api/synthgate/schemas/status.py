"""Status endpoint schemas."""

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Service status returned to authenticated callers."""

    status: str
    version: str
    timestamp: str
    endpoints: dict[str, str]


class PayloadCheckResponse(BaseModel):
    """Result of a publishing payload preflight."""

    valid: bool
    size: int
