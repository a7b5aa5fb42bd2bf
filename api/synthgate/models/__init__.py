"""Database models for the SynthSEO gate."""

from synthgate.models.audit import RequestAuditLog
from synthgate.models.option import SiteOption
from synthgate.models.rate_limit import RateLimitWindow

__all__ = [
    "RateLimitWindow",
    "SiteOption",
    "RequestAuditLog",
]
