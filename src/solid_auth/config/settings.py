from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.constants import GrantType
from ..domain.entities import ClientRegistration, IssuerConfig


@dataclass(slots=True)
class SolidAuthSettings:
    """
    OpenID Provider + client settings for the token flows.

    Host code decides how to construct this (env, config file, etc.).
    """
    issuer: str
    client_id: str
    token_endpoint: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    grant_types_supported: List[str] = field(
        default_factory=lambda: [GrantType.AUTHORIZATION_CODE.value, GrantType.REFRESH_TOKEN.value]
    )

    # HTTP
    verify_ssl: bool = True
    http_timeout: float = 30.0

    # Reject DPoP responses whose token_type is not "DPoP"
    enforce_dpop_token_type: bool = False

    @property
    def issuer_config(self) -> IssuerConfig:
        return IssuerConfig(
            issuer=self.issuer,
            token_endpoint=self.token_endpoint,
            grant_types_supported=tuple(self.grant_types_supported),
        )

    @property
    def client(self) -> ClientRegistration:
        return ClientRegistration(client_id=self.client_id, client_secret=self.client_secret)
