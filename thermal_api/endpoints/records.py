"""Listado de resultados, envío de mediciones y exportación CSV."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Response

from ..auth.units import require_unit
from ..deps import ControllerFactory, get_controllers, get_gateway
from ..domain.classification import SeverityLevel
from ..export.csv_export import MEDIA_TYPE, export_filename, export_records
from ..gateway.client import GatewayClient
from ..schemas import MessageOut, RecordListOut, RecordOut, ThermalSubmissionIn
from ..views.form import submit_measurement


router = APIRouter(prefix="/records", tags=["records"])


@router.get("", response_model=RecordListOut)
async def list_records(
    search: Optional[str] = Query(default=None),
    level: Optional[SeverityLevel] = Query(default=None),
    unit: str = Depends(require_unit),
    controllers: ControllerFactory = Depends(get_controllers),
) -> RecordListOut:
    controller = controllers.records(unit)
    outcome = await controller.refresh()
    page = controller.page(search, level)
    return RecordListOut(
        unit=unit,
        records=[RecordOut.from_record(r) for r in page["records"]],
        counts=page["counts"],
        error=outcome.error_message,
    )


@router.post("", response_model=MessageOut)
async def submit_record(
    payload: ThermalSubmissionIn,
    unit: str = Depends(require_unit),
    gateway: GatewayClient = Depends(get_gateway),
) -> MessageOut:
    message = await submit_measurement(gateway, payload, unit)
    return MessageOut(success=True, message=message)


@router.get("/export")
async def export_csv(
    search: Optional[str] = Query(default=None),
    level: Optional[SeverityLevel] = Query(default=None),
    unit: str = Depends(require_unit),
    controllers: ControllerFactory = Depends(get_controllers),
) -> Response:
    controller = controllers.records(unit)
    outcome = await controller.refresh()
    if outcome.error is not None:
        raise outcome.error

    records = controller.page(search, level)["records"]
    filename = export_filename(unit)
    return Response(
        content=export_records(records),
        media_type=MEDIA_TYPE,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )
