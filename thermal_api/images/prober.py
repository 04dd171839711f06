"""Recorre la cadena de resolución desde el servidor con peticiones reales.

Para cada modo se abre un GET en streaming (solo cabeceras) con el timeout
por intento. Un modo de imagen cuenta como éxito con 2xx y content-type
image/*; el IFRAME solo necesita 2xx. Las referencias que no son de Drive
(y los data URI) no generan ninguna petición: se devuelven tal cual.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .chain import DEFAULT_ATTEMPT_TIMEOUT_SECONDS, ChainStatus, ImageResolutionChain
from .resolver import AccessMode, is_data_uri, is_drive_ref

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    status: ChainStatus
    mode: Optional[AccessMode]
    url: Optional[str]
    fallback_link: Optional[str]

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "mode": self.mode.value if self.mode else None,
            "url": self.url,
            "fallbackLink": self.fallback_link,
        }


async def _attempt(client: httpx.AsyncClient, url: str, mode: AccessMode, timeout: float) -> bool:
    async with client.stream("GET", url, timeout=timeout, follow_redirects=True) as response:
        if not response.is_success:
            return False
        if mode is AccessMode.IFRAME:
            return True
        content_type = response.headers.get("content-type", "")
        return content_type.startswith("image/")


async def probe_image(
    ref: str,
    client: httpx.AsyncClient,
    *,
    attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS,
    chain: Optional[ImageResolutionChain] = None,
) -> ProbeResult:
    chain = chain or ImageResolutionChain(attempt_timeout=attempt_timeout)
    attempt = chain.open(ref)

    # Solo se consultan URLs de Drive; el resto se devuelve tal cual sin petición
    if is_data_uri(ref) or not is_drive_ref(ref):
        chain.loaded(attempt)
    while chain.status is ChainStatus.LOADING:
        mode = chain.mode
        url = chain.url
        try:
            ok = await _attempt(client, url, mode, attempt_timeout)
        except httpx.TimeoutException:
            chain.timed_out(attempt)
            continue
        except httpx.RequestError as e:
            logger.info("[IMAGES] %s request error: %s", mode.value, e)
            chain.failed(attempt)
            continue

        if ok:
            chain.loaded(attempt)
        else:
            chain.failed(attempt)

    return ProbeResult(
        status=chain.status,
        mode=chain.mode,
        url=chain.url,
        fallback_link=chain.fallback_link,
    )
