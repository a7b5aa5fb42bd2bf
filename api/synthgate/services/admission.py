"""
Request admission gate.

Every protected endpoint runs the gate before its handler: the rate limiter
first, then credential checks. Rejections are returned as values so the
caller decides how to render them; only store outages raise.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

from synthgate.auth.credentials import Authenticator, extract_credential
from synthgate.errors import GateUnavailableError
from synthgate.inbound import InboundRequest
from synthgate.services.client_identity import ClientIdentity, resolve_client_identity
from synthgate.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

LEGACY_AUDIT_LABEL = "legacy"


class RejectKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_CREDENTIAL = "invalid_credential"
    FORBIDDEN = "forbidden"


# kind -> (http status, error code, message)
REJECTIONS: dict[RejectKind, tuple[int, str, str]] = {
    RejectKind.RATE_LIMITED: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        "rate_limit_exceeded",
        "Rate limit exceeded. Please try again later.",
    ),
    RejectKind.MISSING_CREDENTIAL: (
        status.HTTP_401_UNAUTHORIZED,
        "missing_authentication",
        "Authentication token required",
    ),
    RejectKind.INVALID_CREDENTIAL: (
        status.HTTP_401_UNAUTHORIZED,
        "invalid_authentication",
        "Invalid authentication token",
    ),
    RejectKind.FORBIDDEN: (
        status.HTTP_401_UNAUTHORIZED,
        "rest_forbidden",
        "Sorry, you are not allowed to do that.",
    ),
}


@dataclass(frozen=True)
class Allow:
    client_id: str
    auth_client: str

    allowed = True


@dataclass(frozen=True)
class Reject:
    kind: RejectKind
    client_id: str

    allowed = False

    @property
    def http_status(self) -> int:
        return REJECTIONS[self.kind][0]

    @property
    def code(self) -> str:
        return REJECTIONS[self.kind][1]

    @property
    def message(self) -> str:
        return REJECTIONS[self.kind][2]


AdmissionDecision = Union[Allow, Reject]


class AuditRecorder(Protocol):
    async def record(
        self, request: InboundRequest, identity: ClientIdentity, auth_client: str
    ) -> object: ...


class AdmissionGate:
    """Composes the rate limiter and authenticator for one request."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        authenticator: Authenticator,
        audit: AuditRecorder | None = None,
    ):
        self.rate_limiter = rate_limiter
        self.authenticator = authenticator
        self.audit = audit

    async def admit(self, request: InboundRequest) -> AdmissionDecision:
        identity = resolve_client_identity(request)
        try:
            if not await self.rate_limiter.check(identity.client_id):
                return self._reject(RejectKind.RATE_LIMITED, identity, request)

            credential = extract_credential(request)
            if credential is None:
                return self._reject(RejectKind.MISSING_CREDENTIAL, identity, request)

            auth_client = await self.authenticator.identify(credential)
            if auth_client is None:
                return self._reject(RejectKind.INVALID_CREDENTIAL, identity, request)
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, identity) from exc

        await self._record(request, identity, auth_client)
        return Allow(client_id=identity.client_id, auth_client=auth_client)

    async def admit_legacy(self, request: InboundRequest) -> AdmissionDecision:
        """Admission for deprecated endpoints that only understand ``X-Api-Key``."""
        identity = resolve_client_identity(request)
        try:
            if not await self.rate_limiter.check(identity.client_id):
                return self._reject(RejectKind.RATE_LIMITED, identity, request)

            if not await self.authenticator.verify_legacy(request):
                return self._reject(RejectKind.FORBIDDEN, identity, request)
        except SQLAlchemyError as exc:
            raise self._unavailable(exc, identity) from exc

        await self._record(request, identity, LEGACY_AUDIT_LABEL)
        return Allow(client_id=identity.client_id, auth_client=LEGACY_AUDIT_LABEL)

    def _reject(
        self, kind: RejectKind, identity: ClientIdentity, request: InboundRequest
    ) -> Reject:
        decision = Reject(kind=kind, client_id=identity.client_id)
        logger.info(
            "api_request_rejected",
            extra={
                "code": decision.code,
                "client_id": identity.client_id,
                "method": request.method,
                "endpoint": request.route,
            },
        )
        return decision

    def _unavailable(self, exc: Exception, identity: ClientIdentity) -> GateUnavailableError:
        logger.error(
            "admission_store_unavailable",
            extra={"client_id": identity.client_id, "error": str(exc)},
        )
        return GateUnavailableError("Admission stores are unavailable")

    async def _record(
        self, request: InboundRequest, identity: ClientIdentity, auth_client: str
    ) -> None:
        if self.audit is None:
            return
        try:
            await self.audit.record(request, identity, auth_client)
        except Exception:
            # Audit is best-effort; an admitted request stays admitted.
            logger.warning(
                "audit_record_failed",
                exc_info=True,
                extra={"client_id": identity.client_id},
            )
