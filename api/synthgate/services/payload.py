"""Size and content checks for inbound publishing payloads."""

import json
import re
from typing import Any

from fastapi import status

from synthgate.config import settings
from synthgate.errors import PayloadRejected

SUSPICIOUS_PATTERNS = (
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"onload\s*=", re.IGNORECASE),
    re.compile(r"onerror\s*=", re.IGNORECASE),
    re.compile(r"onclick\s*=", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>", re.IGNORECASE),
    re.compile(r"<object[^>]*>", re.IGNORECASE),
    re.compile(r"<embed[^>]*>", re.IGNORECASE),
)


def contains_suspicious_content(content: str) -> bool:
    return any(pattern.search(content) for pattern in SUSPICIOUS_PATTERNS)


def validate_request_data(data: dict[str, Any], max_size: int | None = None) -> int:
    """
    Reject oversized payloads and content carrying script injection markers.

    Returns the encoded payload size in bytes.

    Raises:
        PayloadRejected: 413 if the encoded payload is too large,
            400 if ``content`` matches a suspicious pattern
    """
    limit = max_size if max_size is not None else settings.max_request_size
    encoded = json.dumps(data, ensure_ascii=False, default=str).encode("utf-8")
    if len(encoded) > limit:
        raise PayloadRejected(
            "request_too_large",
            "Request payload too large",
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )

    content = data.get("content")
    if isinstance(content, str) and content and contains_suspicious_content(content):
        raise PayloadRejected(
            "suspicious_content",
            "Content contains suspicious patterns",
            status.HTTP_400_BAD_REQUEST,
        )
    return len(encoded)
