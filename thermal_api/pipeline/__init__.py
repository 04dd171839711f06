"""Pipeline de lectura: normalización -> validez -> filtros por vista -> orden.

Estructura:
- normalization.py: limpieza de marcadores y coerción de postTemp
- dates.py: parseo de fechas en varios formatos y formato vi-VN
- filters.py: filtros de validez, unidad, severidad, búsqueda y orden
"""

from .dates import format_vi_date, parse_record_date, parse_record_datetime
from .filters import (
    ALL_UNITS,
    FILE_HOST_MARKER,
    LIST_SEARCH_FIELDS,
    PLAN_SEARCH_FIELDS,
    count_by_severity,
    filter_by_severity,
    filter_by_unit,
    filter_plan_candidates,
    filter_valid,
    is_valid_record,
    search,
    sort_latest_first,
)
from .normalization import ESCAPE_MARKER, add_marker, normalize_record, normalize_records, strip_marker

__all__ = [
    "ALL_UNITS",
    "FILE_HOST_MARKER",
    "LIST_SEARCH_FIELDS",
    "PLAN_SEARCH_FIELDS",
    "ESCAPE_MARKER",
    "add_marker",
    "strip_marker",
    "normalize_record",
    "normalize_records",
    "is_valid_record",
    "filter_valid",
    "filter_by_unit",
    "filter_plan_candidates",
    "filter_by_severity",
    "count_by_severity",
    "search",
    "sort_latest_first",
    "parse_record_date",
    "parse_record_datetime",
    "format_vi_date",
]
