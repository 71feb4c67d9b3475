"""
solid_auth

Solid / OpenID Connect token flows: authorization-code exchange and
refresh against an OpenID Provider token endpoint, with optional DPoP
binding and WebID extraction. Collaborators are plain ports so hosts can
plug in their own transport, storage and key handling.
"""

__version__ = "0.1.0"

from .domain.entities import (
    AuthorizationCodeInput,
    ClientRegistration,
    DpopTokenResult,
    IssuerConfig,
    RefreshTokenInput,
    SessionRecord,
    TokenRequestInput,
    TokenResult,
)
from .domain.constants import GrantType, StorageField
from .domain.exceptions import (
    AuthenticationError,
    ProtocolError,
    MalformedResponseError,
    TokenTypeMismatchError,
    UnsupportedGrantError,
    MissingTokenEndpointError,
    MissingSessionStateError,
    InvalidIdTokenError,
    InvalidWebIdError,
    BadTokenClaimsError,
    NetworkError,
    UnknownIssuerError,
)
from .domain.value_objects import ValidatedTokenResponse, ValidationFailure, WebId
from .domain.ports import (
    ClientRegistrar,
    DpopSigner,
    HttpClient,
    IssuerConfigFetcher,
    JwtDecoder,
    SessionStorage,
)

from .application.use_cases.validate_response import ResponseValidator
from .application.use_cases.derive_webid import WebIdExtractor
from .application.use_cases.exchange import TokenExchangeUseCase
from .application.use_cases.request_tokens import TokenRequesterUseCase
from .application.use_cases.refresh import TokenRefresherUseCase

# Default adapters
from .adapters.http.httpx_client import HttpxHttpClient
from .adapters.jwt.decoder import UnverifiedJWTDecoder
from .adapters.jwt.dpop import PyJWTDpopSigner
from .adapters.storage.memory import InMemorySessionStorage
from .adapters.static.registry import StaticClientRegistrar, StaticIssuerConfigFetcher

from .config import SolidAuthSettings, settings_from_env
from .integrations.common.auth_factory import AuthDependencies, create_auth_dependencies

__all__ = [
    "__version__",
    # domain core
    "AuthorizationCodeInput",
    "ClientRegistration",
    "DpopTokenResult",
    "IssuerConfig",
    "RefreshTokenInput",
    "SessionRecord",
    "TokenRequestInput",
    "TokenResult",
    "GrantType",
    "StorageField",
    "ValidatedTokenResponse",
    "ValidationFailure",
    "WebId",
    # ports
    "ClientRegistrar",
    "DpopSigner",
    "HttpClient",
    "IssuerConfigFetcher",
    "JwtDecoder",
    "SessionStorage",
    # exceptions
    "AuthenticationError",
    "ProtocolError",
    "MalformedResponseError",
    "TokenTypeMismatchError",
    "UnsupportedGrantError",
    "MissingTokenEndpointError",
    "MissingSessionStateError",
    "InvalidIdTokenError",
    "InvalidWebIdError",
    "BadTokenClaimsError",
    "NetworkError",
    "UnknownIssuerError",
    # use cases
    "ResponseValidator",
    "WebIdExtractor",
    "TokenExchangeUseCase",
    "TokenRequesterUseCase",
    "TokenRefresherUseCase",
    # adapters
    "HttpxHttpClient",
    "UnverifiedJWTDecoder",
    "PyJWTDpopSigner",
    "InMemorySessionStorage",
    "StaticClientRegistrar",
    "StaticIssuerConfigFetcher",
    # wiring
    "SolidAuthSettings",
    "settings_from_env",
    "AuthDependencies",
    "create_auth_dependencies",
]
