"""CacheController - Controlador de cache offline de los assets de la página.

Máquina de estados explícita:
    UNINSTALLED → INSTALLING → INSTALLED → ACTIVATING → ACTIVE → REDUNDANT

Cada evento del ciclo de vida (install, activate, request interceptada)
devuelve un asyncio.Task; quien lo invoca debe esperarlo antes de dar la
fase por terminada. Las escrituras en background (write-back cross-origin)
se esperan con ``wait_until_settled()``.

Política de requests:
- Mismo origin: cache-first, sin write-back (solo el install puebla).
- Cross-origin: network-first, write-back del clon si la respuesta es ok,
  fallback a cache si la red falla.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, List, Optional, Sequence, Set, TypeVar
from urllib.parse import urljoin

from prometheus_client import Counter

from .cache_store import CacheBucket, CacheStore
from .errors import AssetFetchFailure, ControllerNotActive, InvalidTransition, NetworkFailure
from .fetcher import AssetFetcher
from .models import ALLOWED_TRANSITIONS, AssetRequest, AssetResponse, ControllerState, origin_of

logger = logging.getLogger(__name__)

T = TypeVar("T")

OFFLINE_REQUESTS = Counter(
    "offline_cache_requests_total",
    "Intercepted requests handled by the offline cache controller",
    ["route", "outcome"],  # route: same_origin|cross_origin
)
OFFLINE_LIFECYCLE = Counter(
    "offline_cache_lifecycle_total",
    "Lifecycle transitions of the offline cache controller",
    ["state"],
)


class CacheController:
    """Controlador de una versión del cache offline.

    Uso:
        controller = CacheController("v1.1", assets, origin, store, fetcher)
        await controller.install()
        await controller.activate()
        response = await controller.handle_fetch(AssetRequest(url))
    """

    def __init__(
        self,
        version: str,
        assets: Sequence[str],
        origin: str,
        store: CacheStore,
        fetcher: AssetFetcher,
        cache_prefix: str = "aquarium-tracker-",
    ):
        self.version = version
        self.cache_prefix = cache_prefix
        self.cache_name = f"{cache_prefix}{version}"
        self.origin = origin_of(origin)
        self._base_url = origin.rstrip("/") + "/"
        self._assets = tuple(assets)
        self._store = store
        self._fetcher = fetcher

        self._state = ControllerState.UNINSTALLED
        self._bucket: Optional[CacheBucket] = None
        self._pending: Set[asyncio.Task] = set()

        self._stats = {
            "cache_hits": 0,
            "cache_misses": 0,
            "network_fetches": 0,
            "network_failures": 0,
            "fallbacks": 0,
            "write_backs": 0,
        }

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == ControllerState.ACTIVE

    @property
    def assets(self) -> tuple:
        return self._assets

    @property
    def stats(self) -> dict:
        return dict(self._stats, pending_tasks=len(self._pending))

    def _transition(self, target: ControllerState) -> None:
        if target not in ALLOWED_TRANSITIONS[self._state]:
            raise InvalidTransition(self._state.value, target.value)
        logger.info(
            "[OFFLINE] %s: %s -> %s", self.cache_name, self._state.value, target.value,
        )
        self._state = target
        OFFLINE_LIFECYCLE.labels(state=target.value).inc()

    def retire(self) -> None:
        """Marca esta versión como reemplazada (su bucket lo borra la sucesora)."""
        if self._state != ControllerState.REDUNDANT:
            self._transition(ControllerState.REDUNDANT)

    # ------------------------------------------------------------------
    # Eventos del ciclo de vida
    # ------------------------------------------------------------------

    def install(self) -> asyncio.Task:
        """Descarga y guarda todos los assets del manifiesto (todo o nada)."""
        return asyncio.ensure_future(self._install())

    def activate(self) -> asyncio.Task:
        """Borra los buckets viejos de este sistema y activa el actual."""
        return asyncio.ensure_future(self._activate())

    def handle_fetch(self, request: AssetRequest) -> asyncio.Task:
        """Resuelve una request interceptada. El Task lanza NetworkFailure si no hay respuesta."""
        return asyncio.ensure_future(self._handle_fetch(request))

    async def wait_until_settled(self) -> None:
        """Espera a que terminen las escrituras en background."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def resolve(self, path: str) -> str:
        """Resuelve una ruta relativa del manifiesto contra el origin."""
        return urljoin(self._base_url, path)

    def is_same_origin(self, request: AssetRequest) -> bool:
        return request.origin == self.origin

    async def _install(self) -> None:
        self._transition(ControllerState.INSTALLING)
        requests = [AssetRequest(self.resolve(path)) for path in self._assets]

        # Se espera a que todas las descargas terminen antes de decidir
        results = await asyncio.gather(
            *(self._fetch_asset(path, req) for path, req in zip(self._assets, requests)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                self._transition(ControllerState.REDUNDANT)
                logger.warning("[OFFLINE] %s: install aborted: %s", self.cache_name, result)
                raise result

        bucket = await self._store.open(self.cache_name)
        await bucket.put_all(zip(requests, results))
        self._transition(ControllerState.INSTALLED)
        logger.info("[OFFLINE] %s: %d assets cached", self.cache_name, len(requests))

    async def _fetch_asset(self, path: str, request: AssetRequest) -> AssetResponse:
        try:
            response = await self._fetcher.fetch(request)
        except NetworkFailure as e:
            raise AssetFetchFailure(path, e.reason) from e
        if not response.ok:
            raise AssetFetchFailure(path, f"HTTP {response.status}")
        return response

    async def _activate(self) -> List[str]:
        self._transition(ControllerState.ACTIVATING)
        try:
            names = await self._store.keys()
            stale = [
                name for name in names
                if name.startswith(self.cache_prefix) and name != self.cache_name
            ]
            await asyncio.gather(*(self._store.delete(name) for name in stale))
            self._bucket = await self._store.open(self.cache_name)
        except Exception:
            self._transition(ControllerState.REDUNDANT)
            raise

        if stale:
            logger.info("[OFFLINE] %s: deleted stale buckets %s", self.cache_name, stale)
        self._transition(ControllerState.ACTIVE)
        return stale

    # ------------------------------------------------------------------
    # Requests interceptadas
    # ------------------------------------------------------------------

    async def _handle_fetch(self, request: AssetRequest) -> AssetResponse:
        bucket = self._bucket
        if not self.is_active or bucket is None:
            raise ControllerNotActive(self._state.value)

        # Una request en vuelo conserva su bucket aunque la versión se retire
        if self.is_same_origin(request):
            return await self._cache_first(bucket, request)
        return await self._network_first(bucket, request)

    async def _cache_first(self, bucket: CacheBucket, request: AssetRequest) -> AssetResponse:
        cached = await bucket.match(request)
        if cached is not None:
            self._stats["cache_hits"] += 1
            OFFLINE_REQUESTS.labels(route="same_origin", outcome="hit").inc()
            logger.debug("[OFFLINE] cache hit url=%s", request.url)
            return cached

        self._stats["cache_misses"] += 1
        OFFLINE_REQUESTS.labels(route="same_origin", outcome="miss").inc()
        # Sin write-back: NetworkFailure llega tal cual al caller
        return await self._fetch_network(request)

    async def _network_first(self, bucket: CacheBucket, request: AssetRequest) -> AssetResponse:
        try:
            response = await self._fetch_network(request)
        except NetworkFailure:
            self._stats["fallbacks"] += 1
            cached = await bucket.match(request)
            if cached is None:
                OFFLINE_REQUESTS.labels(route="cross_origin", outcome="failed").inc()
                raise
            OFFLINE_REQUESTS.labels(route="cross_origin", outcome="fallback").inc()
            logger.debug("[OFFLINE] network failed, served from cache url=%s", request.url)
            return cached

        if response.ok and request.is_http and request.method.upper() == "GET":
            self._spawn(self._write_back(bucket, request, response.clone()))
        OFFLINE_REQUESTS.labels(route="cross_origin", outcome="network").inc()
        return response

    async def _fetch_network(self, request: AssetRequest) -> AssetResponse:
        self._stats["network_fetches"] += 1
        try:
            return await self._fetcher.fetch(request)
        except NetworkFailure:
            self._stats["network_failures"] += 1
            raise

    async def _write_back(self, bucket: CacheBucket, request: AssetRequest, response: AssetResponse) -> None:
        await bucket.put(request, response)
        self._stats["write_backs"] += 1

    def _spawn(self, coro: Awaitable[T]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("[OFFLINE] %s: background cache write failed: %s", self.cache_name, exc)
