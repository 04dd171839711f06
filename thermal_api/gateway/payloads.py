"""Construcción de cuerpos POST para el Gateway."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..domain.models import NUMERIC_WIRE_KEYS, as_float
from ..pipeline.normalization import add_marker


# Campos que la hoja auto-interpreta como fecha/número (p.ej. "12/5")
ALWAYS_MARKED = ("deviceLocation", "stationName", "feeder")
MARKED_WHEN_PRESENT = ("actionPlan", "processedDate")


def build_submit_payload(record: Dict[str, Any]) -> Dict[str, Any]:
    """Cuerpo de submitThermal a partir de un registro en claves camelCase."""
    payload: Dict[str, Any] = {"action": "submitThermal", **record}

    for key in ALWAYS_MARKED:
        payload[key] = add_marker(str(record.get(key) or ""))

    for key in MARKED_WHEN_PRESENT:
        value = record.get(key)
        payload[key] = add_marker(str(value)) if value else ""

    post_temp = as_float(record.get("postTemp"), None)
    payload["postTemp"] = post_temp if post_temp is not None else ""

    for key in NUMERIC_WIRE_KEYS:
        payload[key] = as_float(record.get(key))

    return payload


def build_action_plan_payload(
    *,
    station_name: str,
    device_location: str,
    date: str,
    action_plan: str,
    processed_date: Optional[str] = None,
    post_temp: Optional[float] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "action": "updateActionPlan",
        "stationName": station_name,
        "deviceLocation": device_location,
        "date": date,
        "actionPlan": action_plan,
    }
    if processed_date is not None:
        payload["processedDate"] = processed_date
    if post_temp is not None:
        payload["postTemp"] = post_temp
    return payload


def build_feeder_payload(action: str, unit: str, feeder: str, sheet_name: str) -> Dict[str, Any]:
    return {
        "action": action,
        "unit": unit.strip(),
        "feeder": feeder.strip(),
        "sheetName": sheet_name,
    }
