"""Modelos del cache offline: requests, responses y estados del controlador."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict
from urllib.parse import urlsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def origin_of(url: str) -> str:
    """Origin normalizado ``scheme://host[:port]`` (sin puerto default)."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    if port is None or _DEFAULT_PORTS.get(scheme) == port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


@dataclass(frozen=True)
class AssetRequest:
    """Request interceptada (método + URL absoluta)."""

    url: str
    method: str = "GET"

    @property
    def origin(self) -> str:
        return origin_of(self.url)

    @property
    def is_http(self) -> bool:
        return urlsplit(self.url).scheme.lower() in ("http", "https")

    @property
    def cache_key(self) -> str:
        return self.url


@dataclass
class AssetResponse:
    """Respuesta de red o de cache."""

    status: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def clone(self) -> AssetResponse:
        return replace(self, headers=dict(self.headers))


class ControllerState(str, Enum):
    """Ciclo de vida del controlador de cache."""

    UNINSTALLED = "uninstalled"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVE = "active"
    REDUNDANT = "redundant"  # install fallido o reemplazado por una versión nueva


ALLOWED_TRANSITIONS = {
    ControllerState.UNINSTALLED: frozenset({ControllerState.INSTALLING}),
    ControllerState.INSTALLING: frozenset({ControllerState.INSTALLED, ControllerState.REDUNDANT}),
    ControllerState.INSTALLED: frozenset({ControllerState.ACTIVATING, ControllerState.REDUNDANT}),
    ControllerState.ACTIVATING: frozenset({ControllerState.ACTIVE, ControllerState.REDUNDANT}),
    ControllerState.ACTIVE: frozenset({ControllerState.REDUNDANT}),
    ControllerState.REDUNDANT: frozenset(),
}
