"""Editor de plan de tratamiento (defectos con deltaT >= 15)."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..auth.units import require_unit
from ..deps import ControllerFactory, get_controllers
from ..schemas import ActionPlanListOut, ActionPlanUpdateIn, MessageOut, RecordOut

router = APIRouter(prefix="/action-plans", tags=["action-plans"])


@router.get("", response_model=ActionPlanListOut)
async def list_action_plans(
    search: Optional[str] = Query(default=None),
    unit: str = Depends(require_unit),
    controllers: ControllerFactory = Depends(get_controllers),
) -> ActionPlanListOut:
    controller = controllers.action_plans(unit)
    outcome = await controller.refresh()
    return ActionPlanListOut(
        unit=unit,
        records=[RecordOut.from_record(r) for r in controller.page(search)],
        error=outcome.error_message,
    )


@router.put("", response_model=MessageOut)
async def update_action_plan(
    payload: ActionPlanUpdateIn,
    unit: str = Depends(require_unit),
    controllers: ControllerFactory = Depends(get_controllers),
) -> MessageOut:
    controller = controllers.action_plans(unit)
    message = await controller.update(
        station_name=payload.station_name,
        device_location=payload.device_location,
        date=payload.date,
        action_plan=payload.action_plan,
        processed_date=payload.processed_date,
        post_temp=payload.post_temp,
    )
    return MessageOut(success=True, message=message)
