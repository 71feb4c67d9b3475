from typing import Any, Mapping, Optional

import jwt
from jwt.exceptions import DecodeError

from ...domain.ports import JwtDecoder


class UnverifiedJWTDecoder(JwtDecoder):
    """
    Adapter implementing the JwtDecoder port using PyJWT.

    Only parses the payload: no signature, expiry or audience checks.
    """

    async def decode(self, token: str) -> Optional[Mapping[str, Any]]:
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except DecodeError:
            return None
        return claims if isinstance(claims, dict) else None
