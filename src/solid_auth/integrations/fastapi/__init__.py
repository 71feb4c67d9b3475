from __future__ import annotations

from .deps import FastAPIAuthorization, to_http_exception
from ..common.auth_factory import create_auth_dependencies, AuthDependencies
from ...config.settings import SolidAuthSettings


def create_fastapi_auth(settings: SolidAuthSettings) -> FastAPIAuthorization:
    """
    High-level helper for FastAPI apps:

    - Creates AuthDependencies from SolidAuthSettings
    - Wraps them in FastAPIAuthorization, exposing:

        fastapi_auth.get_session
        fastapi_auth.router()
    """
    auth: AuthDependencies = create_auth_dependencies(settings)
    return FastAPIAuthorization(auth=auth)


__all__ = ["FastAPIAuthorization", "create_fastapi_auth", "to_http_exception"]
