"""Rate limit window model for per-client request counting."""

from sqlalchemy import TIMESTAMP, Column, Index, Integer, String, text

from synthgate.database import Base


class RateLimitWindow(Base):
    """
    Request counter for one client within one minute-aligned window.

    Keyed on (client_id, window_start) so each minute gets its own row;
    rows older than the retention period are removed by the cleanup sweep.
    """

    __tablename__ = "rate_limit_windows"

    client_id = Column(String(255), primary_key=True)
    window_start = Column(TIMESTAMP(timezone=True), primary_key=True)
    request_count = Column(Integer, nullable=False, server_default=text("0"))

    __table_args__ = (
        Index("idx_rate_limit_window_start", "window_start"),
    )
