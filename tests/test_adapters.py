# tests/test_adapters.py
import httpx
import jwt
import pytest
from jwt.algorithms import ECAlgorithm

from solid_auth.adapters.http.httpx_client import HttpxHttpClient
from solid_auth.adapters.jwt.decoder import UnverifiedJWTDecoder
from solid_auth.adapters.jwt.dpop import PyJWTDpopSigner
from solid_auth.adapters.static.registry import StaticClientRegistrar, StaticIssuerConfigFetcher
from solid_auth.adapters.storage.memory import (
    InMemorySessionStorage,
    load_session_record,
    user_key,
)
from solid_auth.domain.entities import ClientRegistration, IssuerConfig
from solid_auth.domain.exceptions import MissingSessionStateError, NetworkError, UnknownIssuerError

SECRET = "a-test-secret-that-is-long-enough-for-hs256"


# --- httpx ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_httpx_client_posts_form_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["dpop"] = request.headers.get("dpop")
        seen["body"] = request.content.decode()
        return httpx.Response(400, json={"error": "invalid_grant"})

    client = HttpxHttpClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    text = await client.post(
        "https://idp.com/token",
        headers={"content-type": "application/x-www-form-urlencoded", "DPoP": "proof"},
        body="grant_type=refresh_token&client_id=abcde",
    )
    await client.aclose()

    # error statuses are returned for the validator to classify
    assert "invalid_grant" in text
    assert seen == {
        "method": "POST",
        "url": "https://idp.com/token",
        "content_type": "application/x-www-form-urlencoded",
        "dpop": "proof",
        "body": "grant_type=refresh_token&client_id=abcde",
    }


@pytest.mark.asyncio
async def test_httpx_transport_failure_is_a_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpxHttpClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    with pytest.raises(NetworkError, match="https://idp.com/token"):
        await client.post("https://idp.com/token", headers={}, body="")
    await client.aclose()


# --- JWT decoding -------------------------------------------------------------


@pytest.mark.asyncio
async def test_decoder_reads_claims_without_verifying():
    token = jwt.encode({"sub": "https://some.webid", "iss": "https://idp.com"}, SECRET, algorithm="HS256")
    claims = await UnverifiedJWTDecoder().decode(token)
    assert claims == {"sub": "https://some.webid", "iss": "https://idp.com"}


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
async def test_decoder_returns_none_for_garbage(token):
    assert await UnverifiedJWTDecoder().decode(token) is None


# --- DPoP -----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_dpop_keys_are_fresh_p256_keys():
    signer = PyJWTDpopSigner()
    first = await signer.generate_key()
    second = await signer.generate_key()

    assert first["kty"] == "EC"
    assert first["crv"] == "P-256"
    assert "d" in first
    assert first["d"] != second["d"]


@pytest.mark.asyncio
async def test_dpop_proof_is_signed_with_the_embedded_key():
    signer = PyJWTDpopSigner()
    key = await signer.generate_key()

    proof = await signer.create_proof("https://idp.com/token?x=1#frag", "post", key)

    header = jwt.get_unverified_header(proof)
    assert header["typ"] == "dpop+jwt"
    assert header["alg"] == "ES256"
    assert "d" not in header["jwk"]
    assert header["jwk"]["x"] == key["x"]

    claims = jwt.decode(proof, ECAlgorithm.from_jwk(header["jwk"]), algorithms=["ES256"])
    assert claims["htu"] == "https://idp.com/token"
    assert claims["htm"] == "POST"
    assert claims["jti"]
    assert isinstance(claims["iat"], int)


@pytest.mark.asyncio
async def test_dpop_proofs_have_unique_ids():
    signer = PyJWTDpopSigner()
    key = await signer.generate_key()
    a = jwt.decode(await signer.create_proof("https://idp.com/token", "POST", key), options={"verify_signature": False})
    b = jwt.decode(await signer.create_proof("https://idp.com/token", "POST", key), options={"verify_signature": False})
    assert a["jti"] != b["jti"]


# --- storage ----------------------------------------------------------------------


def test_user_key_namespace():
    assert user_key("global") == "solidClientAuthenticationUser:global"


@pytest.mark.asyncio
async def test_storage_keeps_secure_and_insecure_apart():
    storage = InMemorySessionStorage()
    await storage.set_for_user("s1", {"issuer": "https://idp.com"})
    await storage.set_for_user("s1", {"access_token": "a"}, secure=True)
    await storage.set_for_user("s1", {"id_token": "i"}, secure=True)

    assert await storage.get_for_user("s1", "issuer") == "https://idp.com"
    assert await storage.get_for_user("s1", "issuer", secure=True) is None
    assert await storage.get_for_user("s1", "access_token", secure=True) == "a"
    assert await storage.get_for_user("s1", "id_token", secure=True) == "i"
    assert await storage.get_for_user("s2", "access_token", secure=True) is None


@pytest.mark.asyncio
async def test_storage_error_if_null():
    storage = InMemorySessionStorage()
    with pytest.raises(MissingSessionStateError, match=r"\[issuer\].*\[s1\]"):
        await storage.get_for_user("s1", "issuer", error_if_null=True)


@pytest.mark.asyncio
async def test_session_record_and_delete():
    storage = InMemorySessionStorage()
    await storage.set_for_user("s1", {"issuer": "https://idp.com"})
    await storage.set_for_user(
        "s1",
        {"access_token": "a", "web_id": "https://some.webid", "is_logged_in": "true"},
        secure=True,
    )

    record = await load_session_record(storage, "s1")
    assert record.issuer == "https://idp.com"
    assert record.access_token == "a"
    assert record.web_id == "https://some.webid"
    assert record.is_logged_in is True
    assert record.refresh_token is None
    assert record.dpop_key is None

    await storage.set_for_user("s1", {"dpop_key": '{"crv": "P-256", "kty": "EC"}'}, secure=True)
    assert (await load_session_record(storage, "s1")).dpop_key == {"crv": "P-256", "kty": "EC"}

    await storage.delete_all_user_data("s1")
    assert (await load_session_record(storage, "s1")).is_logged_in is False


# --- static registry --------------------------------------------------------------


@pytest.mark.asyncio
async def test_static_registry_lookups():
    config = IssuerConfig(issuer="https://idp.com/", token_endpoint="https://idp.com/token")
    fetcher = StaticIssuerConfigFetcher([config])
    registrar = StaticClientRegistrar({"https://idp.com": ClientRegistration("abcde")})

    assert await fetcher.fetch_config("https://idp.com") is config
    assert (await registrar.get_client({"session_id": "s"}, config)).client_id == "abcde"

    with pytest.raises(UnknownIssuerError, match="other.idp"):
        await fetcher.fetch_config("https://other.idp")

    other = IssuerConfig(issuer="https://other.idp", token_endpoint="https://other.idp/token")
    with pytest.raises(UnknownIssuerError, match=r"\[https://other.idp\].*\[s\]"):
        await registrar.get_client({"session_id": "s"}, other)
