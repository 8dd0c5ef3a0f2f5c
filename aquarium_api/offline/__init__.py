"""Módulo de cache offline de los assets estáticos de la página.

Contiene:
- CacheController: máquina de estados install/activate/fetch de una versión
- OfflineRuntime: despliegue de versiones y retiro de la anterior
- CacheStore / InMemoryCacheStore: almacén de buckets inyectable
- HttpxAssetFetcher: acceso a red con httpx
"""

from .models import AssetRequest, AssetResponse, ControllerState, origin_of
from .errors import (
    AssetFetchFailure,
    ControllerNotActive,
    InvalidTransition,
    NetworkFailure,
    OfflineCacheError,
)
from .cache_store import CacheBucket, CacheStore, InMemoryCacheBucket, InMemoryCacheStore
from .fetcher import AssetFetcher, HttpxAssetFetcher
from .config import OfflineConfig
from .controller import CacheController
from .runtime import OfflineRuntime

__all__ = [
    "AssetRequest",
    "AssetResponse",
    "ControllerState",
    "origin_of",
    "OfflineCacheError",
    "AssetFetchFailure",
    "NetworkFailure",
    "InvalidTransition",
    "ControllerNotActive",
    "CacheBucket",
    "CacheStore",
    "InMemoryCacheBucket",
    "InMemoryCacheStore",
    "AssetFetcher",
    "HttpxAssetFetcher",
    "OfflineConfig",
    "CacheController",
    "OfflineRuntime",
]
