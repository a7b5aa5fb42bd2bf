"""Framework-independent view of an inbound API request."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from starlette.datastructures import Headers
from starlette.requests import Request


class HeaderLookup(Protocol):
    """Case-insensitive header access."""

    def get(self, key: str, default: str | None = None) -> str | None: ...


@dataclass(frozen=True)
class InboundRequest:
    """The parts of a request the admission gate reads."""

    method: str
    route: str
    headers: HeaderLookup = field(default_factory=Headers)
    peer_address: str | None = None
    request_id: str | None = None

    def header(self, name: str) -> str | None:
        """Return a header value, treating empty values as absent."""
        value = self.headers.get(name)
        return value or None

    @classmethod
    def build(
        cls,
        method: str = "GET",
        route: str = "/",
        headers: Mapping[str, str] | None = None,
        peer_address: str | None = None,
    ) -> "InboundRequest":
        """Build a request from a plain header mapping."""
        return cls(
            method=method,
            route=route,
            headers=Headers(headers=dict(headers or {})),
            peer_address=peer_address,
        )

    @classmethod
    def from_starlette(cls, request: Request) -> "InboundRequest":
        """Adapt a Starlette/FastAPI request."""
        return cls(
            method=request.method,
            route=request.url.path,
            headers=request.headers,
            peer_address=request.client.host if request.client else None,
            request_id=getattr(request.state, "request_id", None),
        )
