from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from common.config import Settings, cached_settings
from common.db import build_engine

from .auth.units import UnitDirectory
from .deps import ControllerFactory
from .endpoints import (
    action_plans_router,
    analysis_router,
    auth_router,
    dashboard_router,
    feeders_router,
    health_router,
    images_router,
    records_router,
)
from .feeders.catalog import FeederCatalog
from .feeders.repository import FeederCacheRepository
from .gateway.client import GatewayClient
from .gateway.errors import GatewayError

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    gateway: Optional[GatewayClient] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Construye la app. Los tests inyectan settings, gateway y cliente HTTP."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or cached_settings()
        _configure_logging(cfg.log_level)

        gw = gateway or GatewayClient(
            cfg.gateway_url,
            timeout_seconds=cfg.fetch_timeout_seconds,
            sheet_name=cfg.feeder_sheet_name,
        )
        http = http_client or httpx.AsyncClient(follow_redirects=True)
        engine = build_engine(cfg.feeder_cache_url)
        repository = FeederCacheRepository(engine, defaults=cfg.unit_feeders)

        app.state.settings = cfg
        app.state.gateway = gw
        app.state.http = http
        app.state.engine = engine
        app.state.feeders = FeederCatalog(repository, gw)
        app.state.controllers = ControllerFactory(gw)
        app.state.units = UnitDirectory(cfg.unit_passwords)

        if not gw.configured:
            logger.warning("[APP] GATEWAY_URL not set; every sheet operation will fail")
        logger.info("[APP] Started units=%d", len(cfg.unit_passwords))

        yield

        # Solo cerramos lo que creamos aquí
        if gateway is None:
            await gw.aclose()
        if http_client is None:
            await http.aclose()
        engine.dispose()
        logger.info("[APP] Stopped")

    app = FastAPI(title="Thermal Inspection Service", version="1.0.0", lifespan=lifespan)

    @app.exception_handler(GatewayError)
    async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        logger.info("[APP] %s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(records_router)
    app.include_router(action_plans_router)
    app.include_router(dashboard_router)
    app.include_router(feeders_router)
    app.include_router(images_router)
    app.include_router(analysis_router)
    return app


app = create_app()
