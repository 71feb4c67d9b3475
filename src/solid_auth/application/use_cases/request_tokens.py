from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ...domain.constants import StorageField
from ...domain.entities import DpopTokenResult, RefreshTokenInput, TokenRequestInput, dump_dpop_key
from ...domain.exceptions import BadTokenClaimsError, MissingSessionStateError
from ...domain.ports import (
    ClientRegistrar,
    DpopSigner,
    HttpClient,
    IssuerConfigFetcher,
    JwtDecoder,
    SessionStorage,
)
from .token_endpoint import build_token_request, check_preconditions, send_token_request
from .validate_response import ResponseValidator


@dataclass(slots=True)
class TokenRequesterUseCase:
    """
    Application use case:
    - Look up the session's issuer and client
    - Send a DPoP-bound grant request to the issuer's token endpoint
    - Persist the resulting tokens into secure session storage

    The WebID stored here is the `sub` claim of the *access* token, unlike
    TokenExchangeUseCase which reads it from the ID token.
    """

    storage: SessionStorage
    issuer_config_fetcher: IssuerConfigFetcher
    client_registrar: ClientRegistrar
    http: HttpClient
    signer: DpopSigner
    decoder: JwtDecoder
    validator: ResponseValidator = field(default_factory=ResponseValidator)

    async def execute(self, session_id: str, data: TokenRequestInput) -> DpopTokenResult:
        """
        Raises:
            MissingSessionStateError
            UnsupportedGrantError
            MissingTokenEndpointError
            NetworkError
            MalformedResponseError
            ProtocolError
            TokenTypeMismatchError
            BadTokenClaimsError
        """
        issuer = await self.storage.get_for_user(
            session_id, StorageField.ISSUER.value, error_if_null=True
        )
        if issuer is None:
            raise MissingSessionStateError(f"No issuer stored for session [{session_id}]")

        issuer_config = await self.issuer_config_fetcher.fetch_config(issuer)
        client = await self.client_registrar.get_client({"session_id": session_id}, issuer_config)

        token_endpoint = check_preconditions(issuer_config, data.grant_type, issuer=issuer)
        request = await build_token_request(token_endpoint, client, data, signer=self.signer)
        raw = await send_token_request(self.http, request)

        response = self.validator.execute(raw, dpop_requested=True)

        claims = await self.decoder.decode(response.access_token)
        if not claims or not claims.get("sub"):
            raise BadTokenClaimsError(
                f"The Authorization Server [{issuer}] returned a bad token "
                "(i.e. when decoded we did not find the required 'sub' claim)."
            )
        web_id = str(claims["sub"])

        refresh_token: Optional[str] = response.refresh_token
        if refresh_token is None and isinstance(data, RefreshTokenInput):
            refresh_token = data.refresh_token

        stored = {
            StorageField.ACCESS_TOKEN.value: response.access_token,
            StorageField.ID_TOKEN.value: response.id_token,
            StorageField.WEB_ID.value: web_id,
            StorageField.IS_LOGGED_IN.value: "true",
        }
        if refresh_token is not None:
            stored[StorageField.REFRESH_TOKEN.value] = refresh_token
        if request.dpop_key:
            stored[StorageField.DPOP_KEY.value] = dump_dpop_key(request.dpop_key)
        await self.storage.set_for_user(session_id, stored, secure=True)

        return DpopTokenResult(
            access_token=response.access_token,
            id_token=response.id_token,
            web_id=web_id,
            refresh_token=refresh_token,
            expires_in=response.expires_in,
            dpop_key=request.dpop_key or {},
        )
