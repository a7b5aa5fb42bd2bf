"""Authentication dependencies for FastAPI endpoints."""

import hmac

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from synthgate.auth.credentials import Authenticator
from synthgate.config import settings
from synthgate.database import get_db
from synthgate.errors import AdmissionRejected, GateUnavailableError
from synthgate.inbound import InboundRequest
from synthgate.services.admission import AdmissionGate, Allow, Reject
from synthgate.services.audit import AuditService
from synthgate.services.counter_store import SqlCounterStore
from synthgate.services.options import ApiKeyStore, OptionStore
from synthgate.services.rate_limiter import RateLimiter


async def get_admission_gate(db: AsyncSession = Depends(get_db)) -> AdmissionGate:
    """Build the gate for this request's session, reading the current ceiling."""
    options = OptionStore(db)
    try:
        ceiling = await options.get_rate_limit(settings.rate_limit_per_minute)
    except SQLAlchemyError as exc:
        raise GateUnavailableError("Admission stores are unavailable") from exc

    return AdmissionGate(
        rate_limiter=RateLimiter(SqlCounterStore(db), ceiling=ceiling),
        authenticator=Authenticator(ApiKeyStore(options)),
        audit=AuditService(db),
    )


def _enforce(request: Request, decision: Allow | Reject) -> Allow:
    if isinstance(decision, Reject):
        raise AdmissionRejected(decision)
    request.state.admission = decision
    return decision


async def require_admission(
    request: Request,
    gate: AdmissionGate = Depends(get_admission_gate),
) -> Allow:
    """
    Rate limit and authenticate the request.

    Raises:
        AdmissionRejected: 429 when throttled, 401 when the credential is
            missing or does not match the site key
    """
    decision = await gate.admit(InboundRequest.from_starlette(request))
    return _enforce(request, decision)


async def require_legacy_admission(
    request: Request,
    gate: AdmissionGate = Depends(get_admission_gate),
) -> Allow:
    """Admission for deprecated routes: ``X-Api-Key`` only."""
    decision = await gate.admit_legacy(InboundRequest.from_starlette(request))
    return _enforce(request, decision)


async def require_admin(
    x_admin_token: str | None = Header(default=None, alias="X-Admin-Token"),
) -> None:
    """
    Require the operator token configured for site management.

    Raises:
        HTTPException: 401 if the token is missing, 403 if it does not match
    """
    if not x_admin_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "code": "missing_admin_token",
                "message": "Admin token required",
            },
        )

    if not hmac.compare_digest(
        x_admin_token.encode("utf-8"), settings.admin_token.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "forbidden",
                "message": "Admin access required",
            },
        )
