"""Ayudas del formulario: conclusión sugerida y temperatura ambiente."""

from __future__ import annotations

from typing import Dict

import httpx
from fastapi import APIRouter, Depends, Query

from ..analysis.conclusion import suggest_conclusion
from ..analysis.weather import fetch_ambient_temperature
from ..auth.units import require_unit
from ..deps import get_http_client, get_settings
from ..schemas import ConclusionIn

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post("/conclusion")
async def conclusion(
    payload: ConclusionIn,
    unit: str = Depends(require_unit),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings=Depends(get_settings),
) -> Dict[str, str]:
    return await suggest_conclusion(
        payload.measured_temp,
        payload.reference_temp,
        payload.current_load,
        explainer_url=settings.ai_explainer_url,
        client=client,
    )


@router.get("/ambient")
async def ambient(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    unit: str = Depends(require_unit),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings=Depends(get_settings),
) -> Dict[str, float]:
    temp = await fetch_ambient_temperature(
        lat, lon, api_key=settings.openweather_api_key, client=client
    )
    return {"ambientTemp": round(temp, 1)}
