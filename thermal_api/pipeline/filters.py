"""Filtros y ordenación por vista.

- Validez: descarta filas vacías o con la fecha contaminada por un enlace
  de imagen (defecto conocido de la hoja de origen).
- Unidad: coincidencia exacta; ALL_UNITS solo lo usa el dashboard.
- Plan de tratamiento: deltaT >= 15 o con algún campo de tratamiento ya
  cargado (para no esconder entradas antiguas).
- Búsqueda: subcadena sin distinguir mayúsculas sobre campos por vista.
- Orden: fecha descendente, estable.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from ..domain.classification import SeverityLevel, severity_levels
from ..domain.models import ThermalRecord
from .dates import parse_record_datetime


ALL_UNITS = "Toàn Công ty"

# Subcadena que delata un enlace de imagen filtrado a la columna de fecha
FILE_HOST_MARKER = "drive.google.com"

LIST_SEARCH_FIELDS = ("station_name", "feeder", "device_location", "inspection_type")
PLAN_SEARCH_FIELDS = ("station_name", "device_location", "feeder")


def is_valid_record(record: ThermalRecord) -> bool:
    if not record.station_name or not record.station_name.strip():
        return False
    if not record.date:
        return False
    return FILE_HOST_MARKER not in record.date


def filter_valid(records: Iterable[ThermalRecord]) -> List[ThermalRecord]:
    return [r for r in records if is_valid_record(r)]


def filter_by_unit(records: Iterable[ThermalRecord], unit: str) -> List[ThermalRecord]:
    if unit == ALL_UNITS:
        return list(records)
    return [r for r in records if r.unit == unit]


def filter_plan_candidates(records: Iterable[ThermalRecord], unit: str) -> List[ThermalRecord]:
    return [
        r for r in records
        if r.unit == unit and (r.needs_remediation or r.has_remediation_data)
    ]


def filter_by_severity(
    records: Iterable[ThermalRecord],
    level: Optional[SeverityLevel],
) -> List[ThermalRecord]:
    if level is None:
        return list(records)
    return [r for r in records if r.severity is level]


def count_by_severity(records: Sequence[ThermalRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {"All": len(records)}
    for level in severity_levels():
        counts[level.value] = 0
    for record in records:
        counts[record.severity.value] += 1
    return counts


def search(
    records: Iterable[ThermalRecord],
    query: Optional[str],
    fields: Sequence[str] = LIST_SEARCH_FIELDS,
) -> List[ThermalRecord]:
    needle = (query or "").lower()
    if not needle:
        return list(records)
    return [
        r for r in records
        if any(needle in (getattr(r, f) or "").lower() for f in fields)
    ]


def sort_latest_first(records: Iterable[ThermalRecord]) -> List[ThermalRecord]:
    """Más reciente primero. Fechas ilegibles al final, en su orden original."""
    items = list(records)
    dated: List[tuple[datetime, ThermalRecord]] = []
    undated: List[ThermalRecord] = []
    for record in items:
        parsed = parse_record_datetime(record.date)
        if parsed is None:
            undated.append(record)
        else:
            dated.append((parsed, record))
    # sorted() es estable: empates conservan el orden de entrada
    dated_sorted = sorted(dated, key=lambda pair: pair[0], reverse=True)
    return [r for _, r in dated_sorted] + undated
