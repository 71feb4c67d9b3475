from __future__ import annotations

import logging
from typing import Mapping, Optional

import httpx

from ...domain.exceptions import NetworkError
from ...domain.ports import HttpClient

logger = logging.getLogger(__name__)


class HttpxHttpClient(HttpClient):
    """
    Adapter implementing the HttpClient port on top of `httpx.AsyncClient`.

    Non-2xx responses are returned as-is: OAuth2 error bodies are the
    validator's concern, not the transport's.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        self._client = client or httpx.AsyncClient(verify=verify_ssl, timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(self, url: str, *, headers: Mapping[str, str], body: str) -> str:
        logger.debug("POST %s (dpop=%s)", url, "DPoP" in headers)
        try:
            resp = await self._client.post(url, headers=dict(headers), content=body)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to token endpoint [{url}] failed: {exc}") from exc

        logger.debug("POST %s -> %s", url, resp.status_code)
        return resp.text
