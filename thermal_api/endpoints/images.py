"""Resolución de imágenes de Drive.

/candidates devuelve las URLs de los cuatro modos para que el cliente
recorra la cadena por su cuenta; /resolve la recorre desde el servidor.
"""

from __future__ import annotations

from typing import Any, Dict

import httpx
from fastapi import APIRouter, Depends, Query

from ..auth.units import require_unit
from ..deps import get_http_client, get_settings
from ..images.prober import probe_image
from ..images.resolver import candidate_urls, extract_drive_id

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/candidates")
def candidates(
    ref: str = Query(..., min_length=1),
    unit: str = Depends(require_unit),
) -> Dict[str, Any]:
    return {
        "ref": ref,
        "fileId": extract_drive_id(ref),
        "candidates": [{"mode": mode.value, "url": url} for mode, url in candidate_urls(ref)],
    }


@router.get("/resolve")
async def resolve(
    ref: str = Query(..., min_length=1),
    unit: str = Depends(require_unit),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings=Depends(get_settings),
) -> Dict[str, Any]:
    result = await probe_image(ref, client, attempt_timeout=settings.image_attempt_timeout_seconds)
    return result.to_dict()
