"""Resolve the calling client's address for rate limiting."""

import ipaddress
from dataclasses import dataclass
from enum import Enum

from synthgate.inbound import InboundRequest

UNRESOLVED_ADDRESS = "0.0.0.0"

# Checked in order; the first valid public address wins.
PROXY_HEADERS = (
    "CF-Connecting-IP",
    "X-Forwarded-For",
    "X-Forwarded",
    "X-Cluster-Client-IP",
    "Forwarded-For",
    "Forwarded",
)

PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "fc00::/7",
    )
)

RESERVED_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "0.0.0.0/8",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "240.0.0.0/4",
        "::/128",
        "::1/128",
        "::ffff:0:0/96",
        "fe80::/10",
    )
)


class TrustLevel(str, Enum):
    PROXY = "proxy"
    DIRECT = "direct"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ClientIdentity:
    raw_ip: str
    trust_level: TrustLevel

    @property
    def client_id(self) -> str:
        """Counter key used by the rate limiter."""
        return f"ip_{self.raw_ip}"


def is_public_address(value: str) -> bool:
    """True if ``value`` is a valid IP outside the private and reserved ranges."""
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return False
    for network in PRIVATE_NETWORKS + RESERVED_NETWORKS:
        if address.version == network.version and address in network:
            return False
    return True


def _first_entry(value: str) -> str:
    if "," in value:
        return value.split(",", 1)[0].strip()
    return value.strip()


def resolve_client_identity(request: InboundRequest) -> ClientIdentity:
    """
    Pick the address used to identify the caller.

    Proxy headers are consulted first, then the transport peer. A candidate
    is accepted only if it is a public address. When nothing qualifies the
    peer address is used verbatim, or ``0.0.0.0`` when there is none.
    """
    for name in PROXY_HEADERS:
        value = request.header(name)
        if not value:
            continue
        candidate = _first_entry(value)
        if is_public_address(candidate):
            return ClientIdentity(candidate, TrustLevel.PROXY)

    peer = request.peer_address
    if peer:
        return ClientIdentity(peer, TrustLevel.DIRECT)

    return ClientIdentity(UNRESOLVED_ADDRESS, TrustLevel.UNRESOLVED)
