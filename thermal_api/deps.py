"""Dependencias FastAPI: acceso a los servicios colgados de app.state."""

from __future__ import annotations

import httpx
from fastapi import Request

from .feeders.catalog import FeederCatalog
from .gateway.client import GatewayClient
from .views.controllers import (
    ActionPlanController,
    DashboardController,
    RecordListController,
)


class ControllerFactory:
    """Construye un controlador nuevo para cada petición.

    Cada petición es dueña de sus propios registros y de su FetchGeneration;
    dos peticiones simultáneas de la misma unidad no comparten estado y una
    no puede descartar la lectura de la otra.
    """

    def __init__(self, gateway: GatewayClient):
        self._gateway = gateway

    def records(self, unit: str) -> RecordListController:
        return RecordListController(self._gateway, unit)

    def action_plans(self, unit: str) -> ActionPlanController:
        return ActionPlanController(self._gateway, unit)

    def dashboard(self) -> DashboardController:
        return DashboardController(self._gateway)


def get_gateway(request: Request) -> GatewayClient:
    return request.app.state.gateway


def get_controllers(request: Request) -> ControllerFactory:
    return request.app.state.controllers


def get_feeder_catalog(request: Request) -> FeederCatalog:
    return request.app.state.feeders


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http


def get_settings(request: Request):
    return request.app.state.settings
