from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


DEFAULT_STATIC_ASSETS = (
    "./index.html",
    "./data/optimal.js",
    "./manifest.webmanifest",
)


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[1]
    return str(repo_root / ".env")


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_assets(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_STATIC_ASSETS
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    # Cache offline
    cache_prefix: str
    cache_version: str
    static_assets: Tuple[str, ...]
    origin: str
    fetch_timeout: Optional[float]
    deploy_on_startup: bool

    # Clasificación
    strict_parsing: bool
    reference_table_file: Optional[str]

    log_level: str

    @property
    def cache_name(self) -> str:
        return f"{self.cache_prefix}{self.cache_version}"


def get_settings() -> Settings:
    # Carga el .env si existe, pero las variables reales del entorno tienen prioridad.
    env_file = os.getenv("AQUARIUM_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    timeout_raw = os.getenv("OFFLINE_FETCH_TIMEOUT", "").strip()
    # Sin timeout por defecto: un fetch colgado bloquea solo su propia tarea.
    fetch_timeout = float(timeout_raw) if timeout_raw else None

    table_file = os.getenv("REFERENCE_TABLE_FILE", "").strip() or None

    return Settings(
        cache_prefix=os.getenv("OFFLINE_CACHE_PREFIX", "aquarium-tracker-"),
        cache_version=os.getenv("OFFLINE_CACHE_VERSION", "v1.0"),
        static_assets=_parse_assets(os.getenv("OFFLINE_STATIC_ASSETS")),
        origin=os.getenv("OFFLINE_ORIGIN", "http://localhost:8080").rstrip("/"),
        fetch_timeout=fetch_timeout,
        deploy_on_startup=_parse_bool(os.getenv("OFFLINE_DEPLOY_ON_STARTUP", "false")),
        strict_parsing=_parse_bool(os.getenv("CLASSIFY_STRICT_PARSING", "false")),
        reference_table_file=table_file,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
