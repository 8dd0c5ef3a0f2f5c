"""Endpoints del cache offline: estado, despliegue y requests interceptadas."""

from __future__ import annotations

import logging
from urllib.parse import urljoin

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..dependencies import get_offline_runtime
from ..offline import (
    AssetFetchFailure,
    AssetRequest,
    ControllerNotActive,
    NetworkFailure,
    OfflineRuntime,
)
from ..schemas import DeployIn, OfflineStatusOut

router = APIRouter(prefix="/offline", tags=["offline"])
logger = logging.getLogger(__name__)

# Cabeceras que dependen del transporte original, no del body cacheado
_HOP_HEADERS = {"content-length", "content-encoding", "transfer-encoding", "connection"}


@router.get("/status", response_model=OfflineStatusOut)
async def offline_status(runtime: OfflineRuntime = Depends(get_offline_runtime)):
    return OfflineStatusOut(**await runtime.status())


@router.post("/deploy", response_model=OfflineStatusOut)
async def deploy_version(payload: DeployIn, runtime: OfflineRuntime = Depends(get_offline_runtime)):
    """Instala y activa una versión nueva del cache (retira la anterior)."""
    try:
        await runtime.deploy(payload.version)
    except AssetFetchFailure as e:
        logger.warning("[API] Offline deploy failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return OfflineStatusOut(**await runtime.status())


@router.get("/fetch")
async def offline_fetch(
    url: str = Query(..., min_length=1),
    runtime: OfflineRuntime = Depends(get_offline_runtime),
):
    """Pasa una request de asset por el controlador (rutas relativas → origin)."""
    absolute = urljoin(runtime.config.origin.rstrip("/") + "/", url)
    try:
        response = await runtime.handle_fetch(AssetRequest(absolute))
    except ControllerNotActive as e:
        raise HTTPException(status_code=503, detail=str(e))
    except NetworkFailure as e:
        raise HTTPException(status_code=504, detail=str(e))

    headers = {k: v for k, v in response.headers.items() if k.lower() not in _HOP_HEADERS}
    return Response(content=response.body, status_code=response.status, headers=headers)
