"""Endpoints HTTP del servicio, organizados por vista."""

from .health import router as health_router
from .auth import router as auth_router
from .records import router as records_router
from .action_plans import router as action_plans_router
from .dashboard import router as dashboard_router
from .feeders import router as feeders_router
from .images import router as images_router
from .analysis import router as analysis_router

__all__ = [
    "health_router",
    "auth_router",
    "records_router",
    "action_plans_router",
    "dashboard_router",
    "feeders_router",
    "images_router",
    "analysis_router",
]
