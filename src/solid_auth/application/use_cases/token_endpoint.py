from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

from ...domain.constants import DPOP_HEADER, FORM_CONTENT_TYPE
from ...domain.entities import ClientRegistration, DpopKey, IssuerConfig, TokenRequestInput
from ...domain.exceptions import (
    MalformedResponseError,
    MissingTokenEndpointError,
    UnsupportedGrantError,
)
from ...domain.ports import DpopSigner, HttpClient


@dataclass(slots=True)
class TokenEndpointRequest:
    """
    A fully built POST to a token endpoint, plus the DPoP key it is bound to.
    """
    url: str
    headers: Dict[str, str]
    body: str
    dpop_key: Optional[DpopKey] = None
    form: Dict[str, str] = field(default_factory=dict)


def check_preconditions(
    issuer_config: IssuerConfig,
    grant_type: str,
    *,
    issuer: Optional[str] = None,
) -> str:
    """
    Check the issuer can serve `grant_type` and return its token endpoint.

    `issuer` overrides the identifier quoted in error messages.

    Raises:
        UnsupportedGrantError
        MissingTokenEndpointError
    """
    name = issuer or issuer_config.issuer
    if grant_type and not issuer_config.supports_grant(grant_type):
        raise UnsupportedGrantError(
            f"The issuer [{name}] does not support the [{grant_type}] grant"
        )
    if not issuer_config.token_endpoint:
        raise MissingTokenEndpointError(
            f"This issuer [{name}] does not have a token endpoint"
        )
    return issuer_config.token_endpoint


def basic_auth_header(client: ClientRegistration) -> str:
    credentials = f"{client.client_id}:{client.client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


async def build_token_request(
    token_endpoint: str,
    client: ClientRegistration,
    data: TokenRequestInput,
    *,
    signer: Optional[DpopSigner] = None,
) -> TokenEndpointRequest:
    """
    Build the form body and headers for a token request.

    A DPoP proof is attached when `signer` is given, with a key generated for
    this request only.
    """
    headers: Dict[str, str] = {"content-type": FORM_CONTENT_TYPE}

    dpop_key: Optional[DpopKey] = None
    if signer is not None:
        dpop_key = await signer.generate_key()
        headers[DPOP_HEADER] = await signer.create_proof(token_endpoint, "POST", dpop_key)

    if client.client_secret:
        headers["Authorization"] = basic_auth_header(client)

    form = {**data.form_params(), "client_id": client.client_id}
    return TokenEndpointRequest(
        url=token_endpoint,
        headers=headers,
        body=urlencode(form),
        dpop_key=dpop_key,
        form=form,
    )


async def send_token_request(http: HttpClient, request: TokenEndpointRequest) -> Mapping[str, Any]:
    """
    Issue the request once and parse the JSON body.

    Raises:
        NetworkError (from the HttpClient)
        MalformedResponseError
    """
    text = await http.post(request.url, headers=request.headers, body=request.body)
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise MalformedResponseError(
            f"Token endpoint [{request.url}] returned a non-JSON body: {text[:200]!r}"
        ) from exc

    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"Token endpoint [{request.url}] returned a JSON {type(payload).__name__}, expected an object"
        )
    return payload
