"""Request audit log model."""

import uuid

from sqlalchemy import TIMESTAMP, Column, Index, String, Text, Uuid

from synthgate.database import Base


class RequestAuditLog(Base):
    """
    Audit entry for an admitted API request.

    Written by the admission gate after a request passes rate limiting and
    authentication. Entries are best-effort and never block a request.
    """

    __tablename__ = "request_audit_log"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    timestamp = Column(TIMESTAMP(timezone=True), nullable=False)
    client_id = Column(String(255), nullable=False)
    auth_client = Column(String(64), nullable=False)
    method = Column(String(10), nullable=False)
    route = Column(Text, nullable=False)
    ip_address = Column(String(45))
    user_agent = Column(String(512))
    request_id = Column(Text)

    __table_args__ = (
        Index("idx_audit_timestamp", "timestamp"),
        Index("idx_audit_client", "client_id", "timestamp"),
    )
