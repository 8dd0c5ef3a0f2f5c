"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from ..dependencies import get_offline_runtime
from ..offline import OfflineRuntime

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe — always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(runtime: OfflineRuntime = Depends(get_offline_runtime)):
    """Readiness probe — reporta si hay una versión offline activa.

    La clasificación no depende del cache, así que el servicio siempre está listo;
    ``offline`` indica si las requests de assets se pueden interceptar.
    """
    controller = runtime.current
    return {
        "status": "ready",
        "offline": bool(controller and controller.is_active),
    }


@router.get("/metrics")
def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
