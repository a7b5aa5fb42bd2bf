"""Site option model (key/value settings store)."""

from sqlalchemy import TIMESTAMP, Column, String, Text, func

from synthgate.database import Base


class SiteOption(Base):
    """A single named setting, such as the site API key or rate limit."""

    __tablename__ = "site_options"

    name = Column(String(191), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
