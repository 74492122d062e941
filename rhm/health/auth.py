"""Admin credential check and the typed request context handed to the service."""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from rhm.exceptions import AuthorizationError

ADMIN_API_KEY_HEADER = "x-admin-api-key"


@dataclass(frozen=True)
class AdminRequestContext:
    """Validated admin request: authenticated, with parsed options only."""

    include_history: bool = True
    client_host: str | None = None


def parse_history_flag(value: str | None) -> bool:
    """Only the literal ``"false"`` turns history off."""
    return value != "false"


class AdminAuthGate:
    """
    Compares a caller-supplied admin key against the configured secret.

    Stateless; the comparison is constant-time so near misses and far misses
    take the same time.
    """

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("Admin API key must not be empty")
        self._secret = secret.encode("utf-8")

    def verify(self, credential: str | None) -> None:
        """
        Pass silently on an exact match.

        Raises:
            AuthorizationError: If the credential is missing or wrong
        """
        if not credential:
            raise AuthorizationError()
        if not hmac.compare_digest(credential.encode("utf-8"), self._secret):
            raise AuthorizationError()

    def authorize(
        self,
        credential: str | None,
        history: str | None = None,
        client_host: str | None = None,
    ) -> AdminRequestContext:
        """Verify the credential and build the request context from raw inputs."""
        self.verify(credential)
        return AdminRequestContext(
            include_history=parse_history_flag(history),
            client_host=client_host,
        )
