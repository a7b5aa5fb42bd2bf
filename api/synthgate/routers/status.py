"""Status and preflight endpoints behind the admission gate."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from synthgate import __version__
from synthgate.auth.dependencies import require_admission, require_legacy_admission
from synthgate.schemas.status import PayloadCheckResponse, StatusResponse
from synthgate.services.admission import Allow
from synthgate.services.payload import validate_request_data

router = APIRouter(tags=["Status"])


def _status_payload(request: Request) -> StatusResponse:
    return StatusResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        endpoints={
            "status": str(request.url_for("get_status")),
            "legacy_status": str(request.url_for("get_legacy_status")),
            "validate": str(request.url_for("validate_payload")),
        },
    )


@router.get("/api/v2/status", response_model=StatusResponse)
async def get_status(
    request: Request,
    admission: Allow = Depends(require_admission),
) -> StatusResponse:
    """
    Connection check for the publishing client.

    Requires a valid site key via Bearer token, X-Auth-Token or X-Api-Key.
    """
    return _status_payload(request)


@router.get("/api/v1/legacy/status", response_model=StatusResponse)
async def get_legacy_status(
    request: Request,
    admission: Allow = Depends(require_legacy_admission),
) -> StatusResponse:
    """Connection check for clients still on the v1 X-Api-Key header."""
    return _status_payload(request)


@router.post("/api/v2/validate", response_model=PayloadCheckResponse)
async def validate_payload(
    payload: dict[str, Any] = Body(...),
    admission: Allow = Depends(require_admission),
) -> PayloadCheckResponse:
    """
    Run the publishing payload checks without publishing anything.

    Oversized payloads get 413 and script injection in ``content`` gets 400.
    """
    size = validate_request_data(payload)
    return PayloadCheckResponse(valid=True, size=size)
