"""Resolución de imágenes remotas con degradación progresiva."""

from .chain import ChainStatus, ImageResolutionChain
from .prober import ProbeResult, probe_image
from .resolver import (
    MODE_ORDER,
    AccessMode,
    candidate_urls,
    extract_drive_id,
    is_data_uri,
    is_drive_ref,
    resolve_image_url,
)

__all__ = [
    "AccessMode",
    "MODE_ORDER",
    "ChainStatus",
    "ImageResolutionChain",
    "ProbeResult",
    "probe_image",
    "candidate_urls",
    "extract_drive_id",
    "is_data_uri",
    "is_drive_ref",
    "resolve_image_url",
]
