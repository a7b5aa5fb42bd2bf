"""Credential extraction and verification against the site API key."""

from typing import Protocol

from synthgate.auth.api_key import keys_match
from synthgate.inbound import InboundRequest

BEARER_PREFIX = "Bearer "
LEGACY_CLIENT = "legacy_client"


class SecretStore(Protocol):
    async def get_current_key(self) -> str | None: ...

    async def set_current_key(self, key: str) -> None: ...


def extract_credential(request: InboundRequest) -> str | None:
    """
    Return the credential presented with the request, if any.

    Order: ``Authorization: Bearer <token>``, then ``X-Auth-Token``, then the
    legacy ``X-Api-Key`` header.
    """
    authorization = request.header("Authorization")
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):] or None

    token = request.header("X-Auth-Token")
    if token:
        return token

    return request.header("X-Api-Key")


class Authenticator:
    """Checks presented credentials against the single stored site key."""

    def __init__(self, secret_store: SecretStore):
        self.secret_store = secret_store

    async def verify(self, credential: str) -> bool:
        return await self.identify(credential) is not None

    async def identify(self, credential: str) -> str | None:
        """
        Return the authenticated client label, or None when rejected.

        Per-client tokens are not issued yet, so every credential is checked
        against the shared site key only.
        """
        stored = await self.secret_store.get_current_key()
        if keys_match(stored, credential):
            return LEGACY_CLIENT
        return None

    async def verify_legacy(self, request: InboundRequest) -> bool:
        """Deprecated endpoints accept only the ``X-Api-Key`` header."""
        api_key = request.header("X-Api-Key")
        if not api_key:
            return False
        stored = await self.secret_store.get_current_key()
        return keys_match(stored, api_key)
