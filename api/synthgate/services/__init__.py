"""Services for the SynthSEO gate."""

from synthgate.services.admission import AdmissionGate, Allow, Reject, RejectKind
from synthgate.services.audit import AuditService
from synthgate.services.client_identity import ClientIdentity, resolve_client_identity
from synthgate.services.counter_store import SqlCounterStore
from synthgate.services.options import ApiKeyStore, OptionStore
from synthgate.services.payload import PayloadRejected, validate_request_data
from synthgate.services.rate_limiter import RateLimiter

__all__ = [
    "AdmissionGate",
    "Allow",
    "Reject",
    "RejectKind",
    "AuditService",
    "ClientIdentity",
    "resolve_client_identity",
    "SqlCounterStore",
    "ApiKeyStore",
    "OptionStore",
    "PayloadRejected",
    "validate_request_data",
    "RateLimiter",
]
