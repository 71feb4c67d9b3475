from __future__ import annotations

import secrets
import time
from typing import Any, Dict
from urllib.parse import urlsplit, urlunsplit

import jwt
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm

from ...domain.constants import DPOP_SIGNING_ALG
from ...domain.entities import DpopKey
from ...domain.ports import DpopSigner


def _htu(url: str) -> str:
    """The `htu` claim is the target URI without query and fragment."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def public_jwk(key: DpopKey) -> Dict[str, Any]:
    private_key = ECAlgorithm.from_jwk(dict(key))
    return ECAlgorithm.to_jwk(private_key.public_key(), as_dict=True)


class PyJWTDpopSigner(DpopSigner):
    """
    Adapter implementing the DpopSigner port with PyJWT + cryptography.

    Keys are P-256 and proofs are signed with ES256. Each call to
    `generate_key` returns a brand new key pair.
    """

    async def generate_key(self) -> DpopKey:
        private_key = ec.generate_private_key(ec.SECP256R1())
        jwk = ECAlgorithm.to_jwk(private_key, as_dict=True)
        jwk["alg"] = DPOP_SIGNING_ALG
        return jwk

    async def create_proof(self, url: str, method: str, key: DpopKey) -> str:
        private_key = ECAlgorithm.from_jwk(dict(key))
        claims = {
            "htu": _htu(url),
            "htm": method.upper(),
            "jti": secrets.token_urlsafe(24),
            "iat": int(time.time()),
        }
        return jwt.encode(
            claims,
            private_key,
            algorithm=DPOP_SIGNING_ALG,
            headers={"typ": "dpop+jwt", "jwk": public_jwk(key)},
        )
