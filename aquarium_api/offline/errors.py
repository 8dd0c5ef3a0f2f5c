"""Excepciones del controlador de cache offline."""

from __future__ import annotations


class OfflineCacheError(Exception):
    """Base de errores del cache offline."""


class AssetFetchFailure(OfflineCacheError):
    """Un asset del manifiesto no pudo descargarse durante el install.

    Aborta el rollout de la versión: no se instala nada parcialmente.
    """

    def __init__(self, asset: str, reason: str):
        self.asset = asset
        self.reason = reason
        super().__init__(f"Asset '{asset}' could not be fetched: {reason}")


class NetworkFailure(OfflineCacheError):
    """Fallo de red al resolver una request (sin respuesta disponible)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Network request to '{url}' failed: {reason}")


class InvalidTransition(OfflineCacheError):
    """Transición de estado no permitida en el ciclo de vida del controlador."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition from {current} to {target}")


class ControllerNotActive(OfflineCacheError):
    """Se interceptó una request sin un controlador activo."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Cache controller is not active (state={state})")
