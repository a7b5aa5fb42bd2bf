"""Audit trail for admitted API requests."""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from synthgate.inbound import InboundRequest
from synthgate.models.audit import RequestAuditLog
from synthgate.services.client_identity import ClientIdentity

logger = logging.getLogger(__name__)


class AuditService:
    """Writes one ``request_audit_log`` row per admitted request."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        request: InboundRequest,
        identity: ClientIdentity,
        auth_client: str,
    ) -> RequestAuditLog:
        """
        Log an admitted request.

        Args:
            request: The inbound request (method, route, headers)
            identity: Resolved client identity used for rate limiting
            auth_client: Label of the credential class that authenticated
        """
        timestamp = datetime.now(timezone.utc)
        user_agent = (request.header("User-Agent") or "")[:512]  # Truncate to 512 chars

        logger.info(
            "api_request",
            extra={
                "timestamp": timestamp.isoformat(),
                "client_id": identity.client_id,
                "auth_client": auth_client,
                "method": request.method,
                "endpoint": request.route,
                "ip": identity.raw_ip,
                "user_agent": user_agent,
            },
        )

        entry = RequestAuditLog(
            timestamp=timestamp,
            client_id=identity.client_id,
            auth_client=auth_client,
            method=request.method,
            route=request.route,
            ip_address=identity.raw_ip,
            user_agent=user_agent,
            request_id=request.request_id,
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return entry
