from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .constants import GrantType

# Private JWK as produced by the DPoP signer.
DpopKey = Mapping[str, Any]


def dump_dpop_key(key: DpopKey) -> str:
    """Serialize a DPoP key for string-valued session storage."""
    return json.dumps(dict(key), sort_keys=True)


def load_dpop_key(value: Optional[str]) -> Optional[DpopKey]:
    if not value:
        return None
    return json.loads(value)


@dataclass(frozen=True, slots=True)
class IssuerConfig:
    """
    The subset of OpenID Provider metadata the token flows rely on.

    Fetched by the host (discovery is not part of this package) and passed in.
    """
    issuer: str
    token_endpoint: Optional[str] = None
    grant_types_supported: Tuple[str, ...] = ()

    def supports_grant(self, grant_type: str) -> bool:
        return grant_type in self.grant_types_supported


@dataclass(frozen=True, slots=True)
class ClientRegistration:
    client_id: str
    client_secret: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TokenRequestInput:
    """
    Grant type plus grant-specific form parameters.

    An empty `grant_type` skips the issuer's supported-grant check.
    """
    grant_type: str

    def form_params(self) -> Dict[str, str]:
        return {"grant_type": self.grant_type}


@dataclass(frozen=True, slots=True)
class AuthorizationCodeInput(TokenRequestInput):
    redirect_uri: str = ""
    code: str = ""
    code_verifier: str = ""
    grant_type: str = GrantType.AUTHORIZATION_CODE.value

    def form_params(self) -> Dict[str, str]:
        return {
            "grant_type": self.grant_type,
            "redirect_uri": self.redirect_uri,
            "code": self.code,
            "code_verifier": self.code_verifier,
        }


@dataclass(frozen=True, slots=True)
class RefreshTokenInput(TokenRequestInput):
    refresh_token: str = ""
    grant_type: str = GrantType.REFRESH_TOKEN.value

    def form_params(self) -> Dict[str, str]:
        return {
            "grant_type": self.grant_type,
            "refresh_token": self.refresh_token,
        }


@dataclass(frozen=True, slots=True)
class TokenResult:
    """
    Validated output of a token endpoint call.

    Only ever built from a response that passed `ResponseValidator`.
    """
    access_token: str
    id_token: str
    web_id: str
    refresh_token: Optional[str] = None
    expires_in: Optional[float] = None

    @property
    def is_dpop_bound(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "id_token": self.id_token,
            "web_id": self.web_id,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
            "dpop_bound": self.is_dpop_bound,
        }


@dataclass(frozen=True, slots=True)
class DpopTokenResult(TokenResult):
    """
    Tokens bound to a DPoP key; the key is needed to use the access token.
    """
    dpop_key: DpopKey = field(default_factory=dict)

    @property
    def is_dpop_bound(self) -> bool:
        return True


@dataclass(slots=True)
class SessionRecord:
    """
    Read view over what session storage holds for one session.
    """
    session_id: str
    issuer: Optional[str] = None
    access_token: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    web_id: Optional[str] = None
    is_logged_in: bool = False
    dpop_key: Optional[DpopKey] = None
