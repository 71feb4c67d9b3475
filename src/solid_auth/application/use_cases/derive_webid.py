from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ...domain.exceptions import InvalidIdTokenError, InvalidWebIdError
from ...domain.ports import JwtDecoder
from ...domain.value_objects import WebId


def _has_identity_claims(claims: Mapping[str, Any]) -> bool:
    webid = claims.get("webid")
    if isinstance(webid, str):
        return True
    return (
        isinstance(claims.get("sub"), str)
        and isinstance(claims.get("iss"), str)
        and not webid
    )


@dataclass(slots=True)
class WebIdExtractor:
    """
    Application use case:
    - Decode an ID token via the JwtDecoder port (signature not verified)
    - Derive the user's WebID from its claims

    A `webid` claim wins; otherwise `sub` is used when it is an absolute URI.
    """

    decoder: JwtDecoder

    async def execute(self, id_token: str) -> str:
        """
        Raises:
            InvalidIdTokenError
            InvalidWebIdError
        """
        claims = await self.decoder.decode(id_token)
        if claims is None:
            raise InvalidIdTokenError("Invalid ID token: it could not be decoded")
        return self.from_claims(claims)

    @staticmethod
    def from_claims(claims: Mapping[str, Any]) -> str:
        if not _has_identity_claims(claims):
            raise InvalidIdTokenError(
                f"Invalid ID token: {dict(claims)!r} is missing 'sub' or 'iss' claims"
            )

        webid = claims.get("webid")
        if isinstance(webid, str) and webid:
            return webid

        sub = claims.get("sub")
        iss = claims.get("iss")
        try:
            return str(WebId(sub if isinstance(sub, str) else ""))
        except ValueError as exc:
            raise InvalidWebIdError(
                "Cannot extract WebID from ID token: the ID token returned by "
                f"[{iss}] has no 'webid' claim, nor an IRI-like 'sub' claim: [{sub}]"
            ) from exc
