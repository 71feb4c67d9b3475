from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...adapters.http.httpx_client import HttpxHttpClient
from ...adapters.jwt.decoder import UnverifiedJWTDecoder
from ...adapters.jwt.dpop import PyJWTDpopSigner
from ...adapters.static.registry import StaticClientRegistrar, StaticIssuerConfigFetcher
from ...adapters.storage.memory import InMemorySessionStorage, load_session_record
from ...application.use_cases.exchange import TokenExchangeUseCase
from ...application.use_cases.refresh import TokenRefresherUseCase
from ...application.use_cases.request_tokens import TokenRequesterUseCase
from ...application.use_cases.validate_response import ResponseValidator
from ...config.settings import SolidAuthSettings
from ...domain.constants import StorageField
from ...domain.entities import (
    AuthorizationCodeInput,
    DpopTokenResult,
    SessionRecord,
    TokenResult,
    dump_dpop_key,
)
from ...domain.exceptions import UnknownIssuerError
from ...domain.ports import ClientRegistrar, IssuerConfigFetcher, SessionStorage


@dataclass(slots=True)
class AuthDependencies:
    """
    Framework-agnostic login/session facade.

    Integrations (FastAPI, CLI) call this; it never talks to a framework.
    """

    exchange_use_case: TokenExchangeUseCase
    refresher_use_case: TokenRefresherUseCase
    storage: SessionStorage
    issuer_config_fetcher: IssuerConfigFetcher
    client_registrar: ClientRegistrar
    default_issuer: Optional[str] = None
    default_redirect_uri: Optional[str] = None

    # --- Core operations --------------------------------------------------

    async def exchange_code(
            self,
            *,
            code: str,
            code_verifier: str,
            redirect_uri: Optional[str] = None,
            issuer: Optional[str] = None,
            session_id: str = "",
            use_dpop: bool = True,
    ) -> TokenResult:
        """Authorization code -> tokens, nothing persisted."""
        issuer_config = await self.issuer_config_fetcher.fetch_config(self._issuer(issuer))
        client = await self.client_registrar.get_client({"session_id": session_id}, issuer_config)
        data = AuthorizationCodeInput(
            redirect_uri=redirect_uri or self.default_redirect_uri or "",
            code=code,
            code_verifier=code_verifier,
        )
        return await self.exchange_use_case.execute(issuer_config, client, data, use_dpop)

    async def complete_login(
            self,
            session_id: str,
            *,
            code: str,
            code_verifier: str,
            redirect_uri: Optional[str] = None,
            issuer: Optional[str] = None,
    ) -> TokenResult:
        """
        Finish the redirect leg of a login: exchange the code for DPoP-bound
        tokens and store them for `session_id`.

        A successful login replaces the session's previous record, and the
        DPoP key the tokens are bound to is stored beside them.
        """
        issuer_uri = self._issuer(issuer)
        result = await self.exchange_code(
            code=code,
            code_verifier=code_verifier,
            redirect_uri=redirect_uri,
            issuer=issuer_uri,
            session_id=session_id,
            use_dpop=True,
        )

        await self.storage.delete_all_user_data(session_id)
        await self.storage.set_for_user(session_id, {StorageField.ISSUER.value: issuer_uri})
        stored = {
            StorageField.ACCESS_TOKEN.value: result.access_token,
            StorageField.ID_TOKEN.value: result.id_token,
            StorageField.WEB_ID.value: result.web_id,
            StorageField.IS_LOGGED_IN.value: "true",
        }
        if result.refresh_token:
            stored[StorageField.REFRESH_TOKEN.value] = result.refresh_token
        if isinstance(result, DpopTokenResult):
            stored[StorageField.DPOP_KEY.value] = dump_dpop_key(result.dpop_key)
        await self.storage.set_for_user(session_id, stored, secure=True)
        return result

    async def refresh(self, session_id: str) -> TokenResult:
        return await self.refresher_use_case.execute(session_id)

    async def get_session(self, session_id: str) -> SessionRecord:
        return await load_session_record(self.storage, session_id)

    async def logout(self, session_id: str) -> None:
        await self.storage.delete_all_user_data(session_id)

    def _issuer(self, issuer: Optional[str]) -> str:
        value = issuer or self.default_issuer
        if not value:
            raise UnknownIssuerError("No issuer given and no default issuer configured")
        return value


def create_auth_dependencies(
        settings: SolidAuthSettings,
        *,
        storage: Optional[SessionStorage] = None,
        http: Optional[HttpxHttpClient] = None,
) -> AuthDependencies:
    """
    High-level factory: settings -> AuthDependencies.

    - builds the default adapters (httpx, PyJWT, in-memory storage)
    - wires exchange, requester and refresher use cases
    - returns an AuthDependencies facade.
    """
    http = http or HttpxHttpClient(timeout=settings.http_timeout, verify_ssl=settings.verify_ssl)
    signer = PyJWTDpopSigner()
    decoder = UnverifiedJWTDecoder()
    validator = ResponseValidator(enforce_dpop_token_type=settings.enforce_dpop_token_type)
    storage = storage or InMemorySessionStorage()

    issuer_config_fetcher = StaticIssuerConfigFetcher([settings.issuer_config])
    client_registrar = StaticClientRegistrar({settings.issuer: settings.client})

    exchange_uc = TokenExchangeUseCase(
        http=http,
        signer=signer,
        decoder=decoder,
        validator=validator,
    )
    requester_uc = TokenRequesterUseCase(
        storage=storage,
        issuer_config_fetcher=issuer_config_fetcher,
        client_registrar=client_registrar,
        http=http,
        signer=signer,
        decoder=decoder,
        validator=validator,
    )
    refresher_uc = TokenRefresherUseCase(storage=storage, requester=requester_uc)

    return AuthDependencies(
        exchange_use_case=exchange_uc,
        refresher_use_case=refresher_uc,
        storage=storage,
        issuer_config_fetcher=issuer_config_fetcher,
        client_registrar=client_registrar,
        default_issuer=settings.issuer,
        default_redirect_uri=settings.redirect_uri,
    )
