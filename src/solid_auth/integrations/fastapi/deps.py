from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from .security import extract_session_id_from_request
from ..common.auth_factory import AuthDependencies
from ...domain.entities import SessionRecord, TokenResult
from ...domain.exceptions import (
    AuthenticationError,
    BadTokenClaimsError,
    InvalidIdTokenError,
    MalformedResponseError,
    MissingSessionStateError,
    MissingTokenEndpointError,
    NetworkError,
    ProtocolError,
    TokenTypeMismatchError,
    UnknownIssuerError,
    UnsupportedGrantError,
)


class LoginCallbackBody(BaseModel):
    code: str
    code_verifier: str
    redirect_uri: Optional[str] = None


def to_http_exception(exc: AuthenticationError) -> HTTPException:
    """Map a token flow failure onto an HTTP error for the caller."""
    if isinstance(
        exc,
        (MissingSessionStateError, UnknownIssuerError, InvalidIdTokenError, BadTokenClaimsError),
    ):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, (ProtocolError, MalformedResponseError, TokenTypeMismatchError, NetworkError)):
        code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(exc, (UnsupportedGrantError, MissingTokenEndpointError)):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        code = status.HTTP_401_UNAUTHORIZED
    return HTTPException(status_code=code, detail=str(exc))


def _summary(session_id: str, result: TokenResult) -> Dict[str, Any]:
    # tokens stay server-side
    return {
        "session_id": session_id,
        "web_id": result.web_id,
        "expires_in": result.expires_in,
        "dpop_bound": result.is_dpop_bound,
    }


@dataclass(slots=True)
class FastAPIAuthorization:
    """
    FastAPI integration for solid_auth.

    Exposes a `get_session` dependency and a router with the login callback,
    refresh, me and logout endpoints, all on top of the AuthDependencies
    facade. Every route finds its session through the `X-Session-Id` header
    or the `session_id` cookie.
    """

    auth: AuthDependencies

    # ------------------------------------------------------------------ #
    # Dependencies
    # ------------------------------------------------------------------ #

    async def get_session(self, request: Request) -> SessionRecord:
        """Dependency: require a logged-in session."""
        session_id = extract_session_id_from_request(request)
        record = await self.auth.get_session(session_id)
        if not record.is_logged_in:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not logged in",
            )
        return record

    # ------------------------------------------------------------------ #
    # Routes
    # ------------------------------------------------------------------ #

    def router(self, prefix: str = "") -> APIRouter:
        router = APIRouter(prefix=prefix)
        auth = self.auth

        @router.post("/login/callback")
        async def login_callback(body: LoginCallbackBody, request: Request) -> Dict[str, Any]:
            session_id = extract_session_id_from_request(request)
            try:
                result = await auth.complete_login(
                    session_id,
                    code=body.code,
                    code_verifier=body.code_verifier,
                    redirect_uri=body.redirect_uri,
                )
            except AuthenticationError as exc:
                raise to_http_exception(exc) from exc
            return _summary(session_id, result)

        @router.post("/refresh")
        async def refresh(request: Request) -> Dict[str, Any]:
            session_id = extract_session_id_from_request(request)
            try:
                result = await auth.refresh(session_id)
            except AuthenticationError as exc:
                raise to_http_exception(exc) from exc
            return _summary(session_id, result)

        @router.get("/me")
        async def me(record: SessionRecord = Depends(self.get_session)) -> Dict[str, Any]:
            return {"session_id": record.session_id, "web_id": record.web_id, "issuer": record.issuer}

        @router.post("/logout")
        async def logout(request: Request) -> Dict[str, Any]:
            session_id = extract_session_id_from_request(request)
            await auth.logout(session_id)
            return {"session_id": session_id, "logged_out": True}

        return router
