"""Authentication utilities for the SynthSEO gate."""

from synthgate.auth.api_key import generate_api_key, keys_match
from synthgate.auth.credentials import Authenticator, extract_credential

__all__ = [
    "generate_api_key",
    "keys_match",
    "Authenticator",
    "extract_credential",
]
