"""OfflineRuntime - Dueño del store compartido y del controlador vigente.

Orquesta el despliegue de versiones: install + activate de la nueva versión
y retiro de la anterior. Si el install de la nueva falla, la anterior sigue
activa.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from .cache_store import CacheStore, InMemoryCacheStore
from .config import OfflineConfig
from .controller import CacheController
from .errors import ControllerNotActive
from .fetcher import AssetFetcher, HttpxAssetFetcher
from .models import AssetRequest, AssetResponse, ControllerState

logger = logging.getLogger(__name__)


class OfflineRuntime:
    """Runtime del cache offline para un proceso."""

    def __init__(
        self,
        config: OfflineConfig,
        store: Optional[CacheStore] = None,
        fetcher: Optional[AssetFetcher] = None,
    ):
        self._config = config
        self._store = store if store is not None else InMemoryCacheStore()
        if fetcher is None:
            fetcher = HttpxAssetFetcher(timeout=config.fetch_timeout)
        self._fetcher = fetcher
        self._current: Optional[CacheController] = None
        self._deploy_lock = asyncio.Lock()

    @property
    def config(self) -> OfflineConfig:
        return self._config

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def current(self) -> Optional[CacheController]:
        return self._current

    def build_controller(self, version: Optional[str] = None) -> CacheController:
        return CacheController(
            version=version or self._config.version,
            assets=self._config.static_assets,
            origin=self._config.origin,
            store=self._store,
            fetcher=self._fetcher,
            cache_prefix=self._config.cache_prefix,
        )

    async def deploy(self, version: Optional[str] = None) -> CacheController:
        """Instala y activa una versión; retira la anterior.

        Raises:
            AssetFetchFailure: si algún asset del manifiesto falla
        """
        async with self._deploy_lock:
            controller = self.build_controller(version)
            logger.info("[OFFLINE] Deploying %s", controller.cache_name)

            await controller.install()
            await controller.activate()

            previous, self._current = self._current, controller
            if previous is not None:
                await previous.wait_until_settled()
                previous.retire()
            return controller

    async def handle_fetch(self, request: AssetRequest) -> AssetResponse:
        controller = self._current
        if controller is None:
            raise ControllerNotActive(ControllerState.UNINSTALLED.value)
        return await controller.handle_fetch(request)

    async def status(self) -> Dict[str, Any]:
        controller = self._current
        return {
            "version": controller.version if controller else None,
            "cache_name": controller.cache_name if controller else None,
            "state": controller.state.value if controller else ControllerState.UNINSTALLED.value,
            "buckets": await self._store.keys(),
            "stats": controller.stats if controller else {},
        }

    async def aclose(self) -> None:
        if self._current is not None:
            await self._current.wait_until_settled()
        aclose = getattr(self._fetcher, "aclose", None)
        if aclose is not None:
            await aclose()
