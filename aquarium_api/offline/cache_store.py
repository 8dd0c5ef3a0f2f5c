"""Abstracción del almacén de cache (buckets nombrados de request → response).

Desacopla el controlador del almacenamiento concreto. La plataforma garantiza
put/match/delete atómicos por entrada; InMemoryCacheStore lo replica con un
asyncio.Lock y sirve como fake en tests.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from .models import AssetRequest, AssetResponse


class CacheBucket(ABC):
    """Bucket versionado de pares request → response."""

    name: str

    @abstractmethod
    async def match(self, request: AssetRequest) -> Optional[AssetResponse]:
        """Busca la respuesta cacheada (solo GET). None si no existe."""
        pass

    @abstractmethod
    async def put(self, request: AssetRequest, response: AssetResponse) -> None:
        """Guarda una respuesta. Solo requests GET son cacheables."""
        pass

    @abstractmethod
    async def put_all(self, entries: Iterable[Tuple[AssetRequest, AssetResponse]]) -> None:
        """Guarda todas las entradas de una vez (todo o nada)."""
        pass

    @abstractmethod
    async def keys(self) -> List[str]:
        pass

    @abstractmethod
    async def delete(self, request: AssetRequest) -> bool:
        pass


class CacheStore(ABC):
    """Conjunto de buckets compartido por todas las versiones del controlador."""

    @abstractmethod
    async def open(self, name: str) -> CacheBucket:
        """Abre un bucket, creándolo si no existe."""
        pass

    @abstractmethod
    async def has(self, name: str) -> bool:
        pass

    @abstractmethod
    async def keys(self) -> List[str]:
        """Nombres de todos los buckets existentes (orden de creación)."""
        pass

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Elimina un bucket. True si existía."""
        pass


def _ensure_cacheable(request: AssetRequest) -> None:
    if request.method.upper() != "GET":
        raise ValueError(f"Only GET requests can be cached (got {request.method})")


class InMemoryCacheBucket(CacheBucket):
    """Bucket en memoria. Cada operación es atómica respecto a las demás."""

    def __init__(self, name: str):
        self.name = name
        self._entries: Dict[str, AssetResponse] = {}
        self._lock = asyncio.Lock()

    async def match(self, request: AssetRequest) -> Optional[AssetResponse]:
        if request.method.upper() != "GET":
            return None
        async with self._lock:
            cached = self._entries.get(request.cache_key)
            # Se entrega un clon: el body cacheado nunca se comparte
            return cached.clone() if cached is not None else None

    async def put(self, request: AssetRequest, response: AssetResponse) -> None:
        _ensure_cacheable(request)
        async with self._lock:
            self._entries[request.cache_key] = response.clone()

    async def put_all(self, entries: Iterable[Tuple[AssetRequest, AssetResponse]]) -> None:
        staged = []
        for request, response in entries:
            _ensure_cacheable(request)
            staged.append((request.cache_key, response.clone()))
        async with self._lock:
            self._entries.update(staged)

    async def keys(self) -> List[str]:
        async with self._lock:
            return list(self._entries)

    async def delete(self, request: AssetRequest) -> bool:
        async with self._lock:
            return self._entries.pop(request.cache_key, None) is not None


class InMemoryCacheStore(CacheStore):
    """Implementación sencilla en memoria del almacén de buckets.

    - Un proceso, varias versiones del controlador compartiendo el store.
    - Sin persistencia: se pierde al terminar el proceso.
    """

    def __init__(self) -> None:
        self._buckets: Dict[str, InMemoryCacheBucket] = {}
        self._lock = asyncio.Lock()

    async def open(self, name: str) -> CacheBucket:
        async with self._lock:
            bucket = self._buckets.get(name)
            if bucket is None:
                bucket = InMemoryCacheBucket(name)
                self._buckets[name] = bucket
            return bucket

    async def has(self, name: str) -> bool:
        async with self._lock:
            return name in self._buckets

    async def keys(self) -> List[str]:
        async with self._lock:
            return list(self._buckets)

    async def delete(self, name: str) -> bool:
        async with self._lock:
            return self._buckets.pop(name, None) is not None
