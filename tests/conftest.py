# tests/conftest.py
import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import pytest

from solid_auth.domain.entities import ClientRegistration, IssuerConfig

TOKEN_ENDPOINT = "https://idp.com/token"
ISSUER = "https://idp.com"


class FakeHttp:
    """Records every POST and answers with a canned body (or raises)."""

    def __init__(self, body: Union[str, Mapping[str, Any], Exception] = "{}") -> None:
        self.body = body
        self.calls: List[Dict[str, Any]] = []

    async def post(self, url: str, *, headers: Mapping[str, str], body: str) -> str:
        self.calls.append({"url": url, "headers": dict(headers), "body": body})
        if isinstance(self.body, Exception):
            raise self.body
        if isinstance(self.body, str):
            return self.body
        return json.dumps(self.body)


class FakeSigner:
    """Hands out numbered keys and predictable proofs."""

    def __init__(self) -> None:
        self.generated = 0
        self.proofs: List[tuple] = []

    async def generate_key(self) -> Dict[str, Any]:
        self.generated += 1
        return {"kty": "EC", "kid": f"key-{self.generated}"}

    async def create_proof(self, url: str, method: str, key: Mapping[str, Any]) -> str:
        self.proofs.append((url, method, key["kid"]))
        return f"proof:{key['kid']}"


class FakeDecoder:
    """Returns claims per token, or the same claims for every token."""

    def __init__(
        self,
        claims: Union[None, Mapping[str, Any], Callable[[str], Optional[Mapping[str, Any]]]] = None,
    ) -> None:
        self._claims = claims

    async def decode(self, token: str) -> Optional[Mapping[str, Any]]:
        if callable(self._claims):
            return self._claims(token)
        return self._claims


class FakeIssuerConfigFetcher:
    def __init__(self, config: IssuerConfig) -> None:
        self.config = config
        self.requested: List[str] = []

    async def fetch_config(self, issuer: str) -> IssuerConfig:
        self.requested.append(issuer)
        return self.config


class FakeClientRegistrar:
    def __init__(self, client: ClientRegistration) -> None:
        self.client = client
        self.contexts: List[Mapping[str, str]] = []

    async def get_client(self, context: Mapping[str, str], issuer_config: IssuerConfig) -> ClientRegistration:
        self.contexts.append(context)
        return self.client


@pytest.fixture
def issuer_config() -> IssuerConfig:
    return IssuerConfig(
        issuer=ISSUER,
        token_endpoint=TOKEN_ENDPOINT,
        grant_types_supported=("authorization_code", "refresh_token"),
    )


@pytest.fixture
def public_client() -> ClientRegistration:
    return ClientRegistration(client_id="abcde")


@pytest.fixture
def confidential_client() -> ClientRegistration:
    return ClientRegistration(client_id="abcde", client_secret="12345")


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def webid_decoder() -> FakeDecoder:
    return FakeDecoder({"sub": "https://some.pod/profile/card#me", "iss": ISSUER})


def token_response(**overrides: Any) -> Dict[str, Any]:
    body = {
        "access_token": "1234",
        "id_token": "abcd",
        "token_type": "DPoP",
        "refresh_token": "!@#$",
        "expires_in": 1800,
    }
    body.update(overrides)
    return {k: v for k, v in body.items() if v is not None}
