"""Throttling for site management routes using slowapi.

API traffic is limited by the SQL-backed admission gate; this limiter only
guards operator actions such as key regeneration.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)


def reset_limiter() -> None:
    """Reset the limiter storage. Used in tests to clear rate limit state."""
    limiter.reset()
