"""Catálogo de xuất tuyến de la unidad."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from ..auth.units import require_unit
from ..deps import get_feeder_catalog
from ..feeders.catalog import FeederCatalog
from ..schemas import FeederIn, FeederListOut


router = APIRouter(prefix="/feeders", tags=["feeders"])


@router.get("", response_model=FeederListOut)
async def list_feeders(
    background: BackgroundTasks,
    sync: bool = Query(default=False, description="Esperar la reconciliación con la hoja"),
    unit: str = Depends(require_unit),
    catalog: FeederCatalog = Depends(get_feeder_catalog),
) -> FeederListOut:
    if sync:
        result = await catalog.sync(unit)
        return FeederListOut(
            unit=unit,
            feeders=result.feeders,
            sync_status=result.status.value,
            message=result.message,
        )

    # Copia local al instante; la reconciliación corre después de responder
    background.add_task(catalog.sync, unit)
    return FeederListOut(unit=unit, feeders=catalog.cached(unit), sync_status="syncing")


@router.post("", response_model=FeederListOut)
async def add_feeder(
    payload: FeederIn,
    unit: str = Depends(require_unit),
    catalog: FeederCatalog = Depends(get_feeder_catalog),
) -> FeederListOut:
    feeders = await catalog.add(unit, payload.feeder)
    return FeederListOut(unit=unit, feeders=feeders, sync_status="success", message="Thành công")


@router.delete("/{name}", response_model=FeederListOut)
async def delete_feeder(
    name: str,
    unit: str = Depends(require_unit),
    catalog: FeederCatalog = Depends(get_feeder_catalog),
) -> FeederListOut:
    feeders = await catalog.delete(unit, name)
    return FeederListOut(unit=unit, feeders=feeders, sync_status="success", message="Đã xóa")


@router.post("/{name}/restore", response_model=FeederListOut)
async def restore_feeder(
    name: str,
    unit: str = Depends(require_unit),
    catalog: FeederCatalog = Depends(get_feeder_catalog),
) -> FeederListOut:
    feeders = await catalog.restore(unit, name)
    return FeederListOut(unit=unit, feeders=feeders, sync_status="success", message="Đã khôi phục")


@router.get("/deleted", response_model=List[str])
async def recently_deleted(
    unit: str = Depends(require_unit),
    catalog: FeederCatalog = Depends(get_feeder_catalog),
) -> List[str]:
    return catalog.recently_deleted(unit)
