from __future__ import annotations

from dataclasses import dataclass, field
from typing import cast

from ...domain.entities import (
    ClientRegistration,
    DpopTokenResult,
    IssuerConfig,
    TokenRequestInput,
    TokenResult,
)
from ...domain.ports import DpopSigner, HttpClient, JwtDecoder
from .derive_webid import WebIdExtractor
from .token_endpoint import build_token_request, check_preconditions, send_token_request
from .validate_response import ResponseValidator


@dataclass(slots=True)
class TokenExchangeUseCase:
    """
    Application use case:
    - Exchange an authorization code at the issuer's token endpoint
    - Optionally bind the tokens to a fresh DPoP key
    - Validate the response and derive the WebID from the ID token

    One attempt per call; errors propagate to the caller untouched.
    """

    http: HttpClient
    signer: DpopSigner
    decoder: JwtDecoder
    validator: ResponseValidator = field(default_factory=ResponseValidator)

    async def execute(
        self,
        issuer: IssuerConfig,
        client: ClientRegistration,
        data: TokenRequestInput,
        use_dpop: bool,
    ) -> TokenResult:
        """
        Returns a DpopTokenResult when `use_dpop` is set, a TokenResult otherwise.

        Raises:
            UnsupportedGrantError
            MissingTokenEndpointError
            NetworkError
            MalformedResponseError
            ProtocolError
            TokenTypeMismatchError
            InvalidIdTokenError / InvalidWebIdError
        """
        token_endpoint = check_preconditions(issuer, data.grant_type)

        request = await build_token_request(
            token_endpoint,
            client,
            data,
            signer=self.signer if use_dpop else None,
        )
        raw = await send_token_request(self.http, request)

        response = self.validator.execute(raw, dpop_requested=use_dpop)
        web_id = await WebIdExtractor(self.decoder).execute(response.id_token)

        if request.dpop_key is not None:
            return DpopTokenResult(
                access_token=response.access_token,
                id_token=response.id_token,
                web_id=web_id,
                refresh_token=response.refresh_token,
                expires_in=response.expires_in,
                dpop_key=request.dpop_key,
            )
        return TokenResult(
            access_token=response.access_token,
            id_token=response.id_token,
            web_id=web_id,
            refresh_token=response.refresh_token,
            expires_in=response.expires_in,
        )

    async def get_dpop_token(
        self,
        issuer: IssuerConfig,
        client: ClientRegistration,
        data: TokenRequestInput,
    ) -> DpopTokenResult:
        return cast(DpopTokenResult, await self.execute(issuer, client, data, use_dpop=True))
