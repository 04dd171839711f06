"""Parseo y formato de fechas de registros.

La columna de fecha de la hoja llega en varios formatos textuales:
ISO (2026-03-14), ISO con hora (2026-03-14T00:00:00.000Z) o
DD/MM/YYYY cuando alguien la escribió a mano.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

_DMY_FORMATS = ("%d/%m/%Y", "%d-%m-%Y")


def parse_record_datetime(value: Optional[str]) -> Optional[datetime]:
    """Devuelve un datetime naive en UTC, o None si el texto no es una fecha."""
    if not value:
        return None
    text = str(value).strip()
    if not text:
        return None

    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in _DMY_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_record_date(value: Optional[str]) -> Optional[date]:
    parsed = parse_record_datetime(value)
    return parsed.date() if parsed is not None else None


def format_vi_date(value: Optional[str]) -> str:
    """Fecha en formato vi-VN (D/M/YYYY); el texto original si no se puede parsear."""
    if not value:
        return "N/A"
    parsed = parse_record_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed.day}/{parsed.month}/{parsed.year}"
