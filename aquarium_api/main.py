from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from common.config import get_settings
from .dependencies import get_classifier, get_offline_runtime
from .endpoints import health_router, offline_router, parameters_router
from .offline import AssetFetchFailure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    # La tabla se valida al arrancar: un rango inconsistente aborta el proceso
    get_classifier()

    runtime = get_offline_runtime()
    if settings.deploy_on_startup:
        try:
            await runtime.deploy()
        except AssetFetchFailure as e:
            # El servicio de clasificación sigue disponible sin cache offline
            logger.error("[API] Offline cache not installed: %s", e)

    yield

    await runtime.aclose()


def create_app() -> FastAPI:
    app = FastAPI(title="Aquarium Tracker Service", version="1.0.0", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(parameters_router)
    app.include_router(offline_router)
    return app


app = create_app()
