"""Estadísticas agregadas para el dashboard.

- Conteo mensual (Th1..Th12) de registros del año en curso
- Distribución por severidad (solo niveles con registros)
- Khiếm khuyết: deltaT >= 15, cuántos con plan y cuántos ya procesados
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..domain.classification import severity_levels
from ..domain.models import ThermalRecord
from ..pipeline.dates import parse_record_date

MONTH_LABELS = [f"Th{i}" for i in range(1, 13)]


def monthly_counts(records: Sequence[ThermalRecord], year: int) -> List[Dict[str, Any]]:
    counts = [0] * 12
    for record in records:
        parsed = parse_record_date(record.date)
        if parsed is not None and parsed.year == year:
            counts[parsed.month - 1] += 1
    return [{"name": name, "count": count} for name, count in zip(MONTH_LABELS, counts)]


def severity_distribution(records: Sequence[ThermalRecord]) -> List[Dict[str, Any]]:
    stats = {level: 0 for level in severity_levels()}
    for record in records:
        stats[record.severity] += 1
    return [
        {"name": level.label, "level": level.value, "value": count, "color": level.color}
        for level, count in stats.items()
        if count > 0
    ]


def defect_stats(records: Sequence[ThermalRecord]) -> List[Dict[str, Any]]:
    defects = planned = processed = 0
    for record in records:
        if not record.needs_remediation:
            continue
        defects += 1
        if record.action_plan and record.action_plan.strip():
            planned += 1
        if record.processed_date and record.processed_date.strip():
            processed += 1

    return [
        {"name": "Khiếm khuyết", "key": "defects", "value": defects, "color": "#ef4444"},
        {"name": "Đã lập KH", "key": "planned", "value": planned, "color": "#f59e0b"},
        {"name": "Đã xử lý", "key": "processed", "value": processed, "color": "#10b981"},
    ]


def build_dashboard(
    records: Sequence[ThermalRecord],
    *,
    scope: str,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    today = today or date.today()
    return {
        "scope": scope,
        "year": today.year,
        "total": len(records),
        "monthly": monthly_counts(records, today.year),
        "severity": severity_distribution(records),
        "defects": defect_stats(records),
    }
