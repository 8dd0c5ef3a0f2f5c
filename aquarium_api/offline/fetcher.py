"""Acceso a red para el controlador de cache.

Un fetcher devuelve la respuesta tal cual llegue (incluye 4xx/5xx) y solo
lanza NetworkFailure cuando no hay respuesta alguna.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from .errors import NetworkFailure
from .models import AssetRequest, AssetResponse

logger = logging.getLogger(__name__)


class AssetFetcher(Protocol):
    """Interfaz de acceso a red usada por el controlador."""

    async def fetch(self, request: AssetRequest) -> AssetResponse:
        """Resuelve la request contra la red.

        Raises:
            NetworkFailure: si la red no entrega respuesta
        """
        ...


class HttpxAssetFetcher:
    """Fetcher basado en httpx.AsyncClient.

    Sin timeout por defecto (``timeout=None``): un fetch colgado bloquea su
    tarea indefinidamente. Configurable con OFFLINE_FETCH_TIMEOUT.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)
        self._client = client

    async def fetch(self, request: AssetRequest) -> AssetResponse:
        try:
            resp = await self._client.request(request.method, request.url)
        except httpx.HTTPError as e:
            logger.debug("[OFFLINE] Network error url=%s err=%s", request.url, type(e).__name__)
            raise NetworkFailure(request.url, f"{type(e).__name__}: {e}") from e

        return AssetResponse(
            status=resp.status_code,
            body=resp.content,
            headers=dict(resp.headers),
            url=str(resp.url),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
