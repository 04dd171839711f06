"""Resolución de URLs de imágenes alojadas en Google Drive.

Las URLs directas de Drive (uc?id=) tienen límite de peticiones y fallan a
menudo al incrustarlas; por eso hay cuatro modos de acceso, del más fiel
al más fiable:

1. DIRECT     https://drive.google.com/uc?id=ID
2. THUMBNAIL  https://drive.google.com/thumbnail?id=ID&sz=s1600
3. PROXY      proxy de imágenes de googleusercontent sobre la URL directa
4. IFRAME     https://drive.google.com/file/d/ID/preview

Data URIs y URLs que no son de Drive se devuelven tal cual en todos los modos.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional, Tuple
from urllib.parse import quote


class AccessMode(str, Enum):
    DIRECT = "direct"
    THUMBNAIL = "thumbnail"
    PROXY = "proxy"
    IFRAME = "iframe"


MODE_ORDER: Tuple[AccessMode, ...] = (
    AccessMode.DIRECT,
    AccessMode.THUMBNAIL,
    AccessMode.PROXY,
    AccessMode.IFRAME,
)

DRIVE_HOST = "drive.google.com"
DEFAULT_THUMBNAIL_SIZE = 1600

_ID_PATTERNS = (
    re.compile(r"/d/([-\w]{20,})"),
    re.compile(r"[?&]id=([-\w]{20,})"),
    re.compile(r"/file/d/([-\w]{20,})"),
)
_BARE_ID = re.compile(r"^[-\w]{25,}$")

_PROXY_TEMPLATE = (
    "https://images1-focus-opensocial.googleusercontent.com/gadgets/proxy"
    "?container=focus&refresh=2592000&url={url}"
)


def extract_drive_id(ref: Optional[str]) -> Optional[str]:
    if not ref:
        return None
    clean = ref.strip()
    for pattern in _ID_PATTERNS:
        match = pattern.search(clean)
        if match:
            return match.group(1)
    return None


def _file_id(clean: str) -> Optional[str]:
    if DRIVE_HOST in clean:
        return extract_drive_id(clean)
    if _BARE_ID.match(clean):
        return clean
    return None


def is_data_uri(ref: Optional[str]) -> bool:
    return bool(ref) and ref.strip().startswith("data:")


def is_drive_ref(ref: Optional[str]) -> bool:
    """True si la referencia apunta a un archivo de Drive (URL o id suelto)."""
    if not ref or is_data_uri(ref):
        return False
    return _file_id(ref.strip()) is not None


def resolve_image_url(
    ref: Optional[str],
    mode: AccessMode = AccessMode.DIRECT,
    size: int = DEFAULT_THUMBNAIL_SIZE,
) -> str:
    if not ref:
        return ""
    clean = ref.strip()
    if clean.startswith("data:"):
        return clean

    file_id = _file_id(clean)
    if not file_id:
        return clean

    if mode is AccessMode.THUMBNAIL:
        return f"https://drive.google.com/thumbnail?id={file_id}&sz=s{size}"
    if mode is AccessMode.PROXY:
        direct = f"https://drive.google.com/uc?id={file_id}"
        return _PROXY_TEMPLATE.format(url=quote(direct, safe=""))
    if mode is AccessMode.IFRAME:
        return f"https://drive.google.com/file/d/{file_id}/preview"
    return f"https://drive.google.com/uc?id={file_id}"


def candidate_urls(ref: Optional[str]) -> List[Tuple[AccessMode, str]]:
    """Todas las URLs candidatas en el orden de degradación."""
    return [(mode, resolve_image_url(ref, mode)) for mode in MODE_ORDER]
