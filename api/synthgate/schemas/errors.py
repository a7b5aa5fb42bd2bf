"""Error body shared by every rejection."""

from typing import Any

from pydantic import BaseModel


class ErrorData(BaseModel):
    status: int
    details: list[dict[str, Any]] | None = None


class ErrorResponse(BaseModel):
    """JSON body returned with every 4xx/5xx response."""

    code: str
    message: str
    data: ErrorData
    request_id: str | None = None
