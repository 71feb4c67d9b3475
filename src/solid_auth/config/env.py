from __future__ import annotations

import os

from .settings import SolidAuthSettings


def settings_from_env() -> SolidAuthSettings:
    def _bool(key: str, default: bool) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _split_csv(key: str) -> list[str]:
        raw = os.getenv(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    issuer = os.getenv("SOLID_AUTH_ISSUER")
    client_id = os.getenv("SOLID_AUTH_CLIENT_ID")
    token_endpoint = os.getenv("SOLID_AUTH_TOKEN_ENDPOINT")
    if not all([issuer, client_id, token_endpoint]):
        missing = [
            n
            for n, v in [
                ("SOLID_AUTH_ISSUER", issuer),
                ("SOLID_AUTH_CLIENT_ID", client_id),
                ("SOLID_AUTH_TOKEN_ENDPOINT", token_endpoint),
            ]
            if not v
        ]
        raise RuntimeError(f"Missing Solid auth settings: {', '.join(missing)}")

    settings = SolidAuthSettings(
        issuer=issuer,
        client_id=client_id,
        token_endpoint=token_endpoint,
        client_secret=os.getenv("SOLID_AUTH_CLIENT_SECRET") or None,
        redirect_uri=os.getenv("SOLID_AUTH_REDIRECT_URI") or None,
        verify_ssl=_bool("SOLID_AUTH_VERIFY_SSL", True),
        http_timeout=float(os.getenv("SOLID_AUTH_HTTP_TIMEOUT") or 30.0),
        enforce_dpop_token_type=_bool("SOLID_AUTH_ENFORCE_DPOP_TOKEN_TYPE", False),
    )
    grant_types = _split_csv("SOLID_AUTH_GRANT_TYPES")
    if grant_types:
        settings.grant_types_supported = grant_types
    return settings
