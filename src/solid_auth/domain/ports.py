from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .entities import ClientRegistration, DpopKey, IssuerConfig


class HttpClient(Protocol):
    """
    Port for the single outbound call the token flows make.

    Timeouts and cancellation are the implementation's business.
    """

    async def post(self, url: str, *, headers: Mapping[str, str], body: str) -> str:
        """
        POST `body` to `url` and return the response body as text,
        whatever the status code.

        Raises:
          - NetworkError if no response could be read
        """
        ...


class DpopSigner(Protocol):
    """
    Port for DPoP key generation and proof signing.
    """

    async def generate_key(self) -> DpopKey:
        """Return a freshly generated private key, as a JWK mapping."""
        ...

    async def create_proof(self, url: str, method: str, key: DpopKey) -> str:
        """Return a compact, signed DPoP proof for (`url`, `method`)."""
        ...


class JwtDecoder(Protocol):
    """
    Port for reading the claims of a compact JWT.

    The signature is NOT verified.
    """

    async def decode(self, token: str) -> Optional[Mapping[str, Any]]:
        """Return the claim set, or None if `token` cannot be parsed."""
        ...


class SessionStorage(Protocol):
    """
    Port for per-session key/value storage.

    Each session has a secure and a non-secure record.
    """

    async def get_for_user(
        self,
        session_id: str,
        key: str,
        *,
        secure: bool = False,
        error_if_null: bool = False,
    ) -> Optional[str]:
        """
        Raises:
          - MissingSessionStateError if `error_if_null` and the value is absent
        """
        ...

    async def set_for_user(
        self,
        session_id: str,
        values: Mapping[str, str],
        *,
        secure: bool = False,
    ) -> None:
        ...

    async def delete_all_user_data(self, session_id: str) -> None:
        ...


class IssuerConfigFetcher(Protocol):
    async def fetch_config(self, issuer: str) -> IssuerConfig:
        """
        Raises:
          - UnknownIssuerError if nothing is known about `issuer`
        """
        ...


class ClientRegistrar(Protocol):
    async def get_client(
        self,
        context: Mapping[str, str],
        issuer_config: IssuerConfig,
    ) -> ClientRegistration:
        """
        Resolve the client for `context` (holds `session_id`) at the issuer.

        Implementations may register the client dynamically.

        Raises:
          - UnknownIssuerError if no client can be had at this issuer
        """
        ...
