"""Exportación del listado filtrado a CSV para Excel.

Formato que Excel abre sin romper los acentos vietnamitas: separador TAB,
UTF-16LE con BOM. Los campos de texto van como ="valor" para que Excel no
convierta "12/5" en fecha ni "0123" en número.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Optional, Sequence

import pandas as pd

from ..domain.models import ThermalRecord
from ..pipeline.dates import format_vi_date

logger = logging.getLogger(__name__)

BOM_UTF16LE = b"\xff\xfe"
MEDIA_TYPE = "text/csv; charset=utf-16le"

HEADERS = [
    "Đơn vị", "Trạm/Nhánh rẽ", "Xuất tuyến", "Loại kiểm tra", "Vị trí cột",
    "Pha", "Nhiệt độ đo (°C)", "Tham chiếu (°C)", "Môi trường (°C)",
    "Dòng điện phụ tải (A)", "Kết luận", "Người kiểm tra", "Ngày đo",
    "Kế hoạch xử lý", "Ngày đã xử lý", "Nhiệt độ sau xử lý",
]


def as_excel_text(value: Any) -> str:
    if value is None:
        value = ""
    return '="{}"'.format(str(value).replace('"', '""'))


def _number(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _row(record: ThermalRecord) -> list:
    return [
        as_excel_text(record.unit),
        as_excel_text(record.station_name),
        as_excel_text(record.feeder),
        as_excel_text(record.inspection_type),
        as_excel_text(record.device_location),
        as_excel_text(record.phase),
        _number(record.measured_temp),
        _number(record.reference_temp),
        _number(record.ambient_temp),
        _number(record.current_load),
        as_excel_text(record.conclusion),
        as_excel_text(record.inspector),
        as_excel_text(format_vi_date(record.date)),
        as_excel_text(record.action_plan or ""),
        as_excel_text(format_vi_date(record.processed_date)),
        _number(record.post_temp),
    ]


def records_to_frame(records: Sequence[ThermalRecord]) -> pd.DataFrame:
    return pd.DataFrame([_row(r) for r in records], columns=HEADERS, dtype=str)


def export_records(records: Sequence[ThermalRecord]) -> bytes:
    frame = records_to_frame(records)
    text = frame.to_csv(sep="\t", index=False, lineterminator="\n")
    logger.info("[EXPORT] %d records exported", len(frame))
    return BOM_UTF16LE + text.encode("utf-16-le")


def export_filename(unit: str, now_ms: Optional[int] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    safe_unit = re.sub(r"\s+", "_", unit)
    return f"Ket_qua_nhiet_{safe_unit}_{stamp}.csv"
