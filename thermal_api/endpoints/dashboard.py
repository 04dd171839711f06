"""Estadísticas por unidad o de toda la compañía."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..auth.units import require_unit
from ..deps import ControllerFactory, get_controllers

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def dashboard(
    scope: Optional[str] = Query(default=None, alias="unit", description="Unidad o 'Toàn Công ty'"),
    unit: str = Depends(require_unit),
    controllers: ControllerFactory = Depends(get_controllers),
) -> Dict[str, Any]:
    controller = controllers.dashboard()
    outcome = await controller.refresh()
    stats = controller.stats(scope or unit)
    stats["error"] = outcome.error_message
    return stats
