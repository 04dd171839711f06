"""Health, readiness y métricas Prometheus."""

import logging

from fastapi import APIRouter, HTTPException, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: ok mientras el proceso esté vivo."""
    return {"status": "ok"}


@router.get("/ready")
def ready(request: Request):
    """Readiness probe: almacén local accesible y endpoint remoto configurado."""
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        # No exponer detalles del error al cliente
        logger.exception("[HEALTH] Feeder cache not reachable")
        raise HTTPException(status_code=503, detail="not ready")

    return {
        "status": "ready",
        "gateway_configured": request.app.state.gateway.configured,
    }


@router.get("/metrics")
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
