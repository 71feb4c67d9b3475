from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Sequence

from .adapters.http.httpx_client import HttpxHttpClient
from .adapters.storage.memory import InMemorySessionStorage
from .config.env import settings_from_env
from .domain.constants import StorageField
from .integrations.common.auth_factory import create_auth_dependencies

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="solid-auth",
        description="Exchange or refresh Solid OIDC tokens (settings from SOLID_AUTH_* env)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    exchange = sub.add_parser("exchange", help="Exchange an authorization code for tokens.")
    exchange.add_argument("--code", required=True)
    exchange.add_argument("--code-verifier", required=True, help="PKCE code verifier.")
    exchange.add_argument(
        "--redirect-uri",
        help="Redirect URI used in the authorization request "
             "(defaults from env SOLID_AUTH_REDIRECT_URI).",
    )
    exchange.add_argument(
        "--no-dpop",
        action="store_true",
        help="Request plain Bearer tokens instead of DPoP-bound ones.",
    )

    refresh = sub.add_parser("refresh", help="Use a refresh token to get a new token set.")
    refresh.add_argument("--session-id", default="cli")
    refresh.add_argument("--refresh-token", required=True)

    return parser.parse_args(args=argv)


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    http = HttpxHttpClient(timeout=settings.http_timeout, verify_ssl=settings.verify_ssl)
    storage = InMemorySessionStorage()
    auth = create_auth_dependencies(settings, storage=storage, http=http)

    try:
        if args.command == "exchange":
            result = await auth.exchange_code(
                code=args.code,
                code_verifier=args.code_verifier,
                redirect_uri=args.redirect_uri,
                use_dpop=not args.no_dpop,
            )
        else:
            await storage.set_for_user(args.session_id, {StorageField.ISSUER.value: settings.issuer})
            await storage.set_for_user(
                args.session_id,
                {StorageField.REFRESH_TOKEN.value: args.refresh_token},
                secure=True,
            )
            result = await auth.refresh(args.session_id)
    finally:
        await http.aclose()

    return result.to_dict()


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        summary = asyncio.run(_run(args))
        json.dump({"ok": True, **summary}, sys.stdout, indent=2)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        logger.debug("%s failed", args.command, exc_info=True)
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        raise


if __name__ == "__main__":
    main()
