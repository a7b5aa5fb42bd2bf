"""API key generation and comparison utilities.

The site has exactly one active key. It is generated from the ``secrets``
module over an alphanumeric alphabet so it can be pasted into any header
without escaping.
"""

import hmac
import secrets
import string

from synthgate.config import settings

API_KEY_ALPHABET = string.ascii_letters + string.digits


def generate_api_key(length: int | None = None) -> str:
    """Generate a new random alphanumeric API key (32 characters by default)."""
    size = length or settings.api_key_length
    return "".join(secrets.choice(API_KEY_ALPHABET) for _ in range(size))


def keys_match(stored_key: str | None, presented: str | None) -> bool:
    """Constant-time comparison of a presented credential against the stored key."""
    if not stored_key or not presented:
        return False
    return hmac.compare_digest(stored_key.encode("utf-8"), presented.encode("utf-8"))
