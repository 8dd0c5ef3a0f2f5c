"""Configuración del cache offline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from common.config import DEFAULT_STATIC_ASSETS, Settings, get_settings


@dataclass(frozen=True)
class OfflineConfig:
    """Versión desplegada + manifiesto de assets a pre-cachear."""
    version: str = "v1.0"
    origin: str = "http://localhost:8080"
    static_assets: Tuple[str, ...] = DEFAULT_STATIC_ASSETS
    cache_prefix: str = "aquarium-tracker-"
    fetch_timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OfflineConfig":
        return cls(
            version=settings.cache_version,
            origin=settings.origin,
            static_assets=settings.static_assets,
            cache_prefix=settings.cache_prefix,
            fetch_timeout=settings.fetch_timeout,
        )

    @classmethod
    def from_env(cls) -> "OfflineConfig":
        return cls.from_settings(get_settings())
