"""Módulo de endpoints HTTP.

Contiene los endpoints de la API organizados por función.
"""

from .health import router as health_router
from .parameters import router as parameters_router
from .offline import router as offline_router

__all__ = [
    "health_router",
    "parameters_router",
    "offline_router",
]
