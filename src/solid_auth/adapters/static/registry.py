from __future__ import annotations

from typing import Dict, Iterable, Mapping

from ...domain.entities import ClientRegistration, IssuerConfig
from ...domain.exceptions import UnknownIssuerError
from ...domain.ports import ClientRegistrar, IssuerConfigFetcher


class StaticIssuerConfigFetcher(IssuerConfigFetcher):
    """
    Adapter implementing IssuerConfigFetcher from a fixed set of configs.

    Discovery is left to the host; it hands us what it already knows.
    """

    def __init__(self, configs: Iterable[IssuerConfig]) -> None:
        self._configs: Dict[str, IssuerConfig] = {
            _normalize(c.issuer): c for c in configs
        }

    async def fetch_config(self, issuer: str) -> IssuerConfig:
        config = self._configs.get(_normalize(issuer))
        if config is None:
            raise UnknownIssuerError(f"No configuration known for issuer [{issuer}]")
        return config


class StaticClientRegistrar(ClientRegistrar):
    """
    Adapter implementing ClientRegistrar with pre-registered clients,
    one per issuer.
    """

    def __init__(self, clients: Mapping[str, ClientRegistration]) -> None:
        self._clients = {_normalize(k): v for k, v in clients.items()}

    async def get_client(
        self,
        context: Mapping[str, str],
        issuer_config: IssuerConfig,
    ) -> ClientRegistration:
        client = self._clients.get(_normalize(issuer_config.issuer))
        if client is None:
            raise UnknownIssuerError(
                f"No client registered at issuer [{issuer_config.issuer}] "
                f"(session [{context.get('session_id')}])"
            )
        return client


def _normalize(issuer: str) -> str:
    return issuer.rstrip("/")
