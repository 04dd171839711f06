"""Modelos de dominio para registros de inspección termográfica.

Los registros llegan del Gateway como dicts con claves camelCase; aquí se
tipan para que filtros, clasificación y exportación trabajen sobre
atributos en lugar de claves sueltas.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .classification import SeverityLevel, classify_delta, needs_remediation


class InspectionType(str, Enum):
    PERIODIC = "Định kỳ"
    AD_HOC = "Đột xuất"
    TECHNICAL = "Kỹ thuật"
    POST_REMEDIATION = "Sau xử lý"


class Phase(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    ABC = "ABC"
    NEUTRAL = "N"


# Campo Python -> clave en el Gateway / hoja de cálculo
WIRE_KEYS: Dict[str, str] = {
    "unit": "unit",
    "station_name": "stationName",
    "device_location": "deviceLocation",
    "feeder": "feeder",
    "inspection_type": "inspectionType",
    "phase": "phase",
    "measured_temp": "measuredTemp",
    "reference_temp": "referenceTemp",
    "ambient_temp": "ambientTemp",
    "current_load": "currentLoad",
    "thermal_image_ref": "thermalImage",
    "reference_image_ref": "normalImage",
    "conclusion": "conclusion",
    "inspector": "inspector",
    "date": "date",
    "action_plan": "actionPlan",
    "processed_date": "processedDate",
    "post_temp": "postTemp",
}

NUMERIC_WIRE_KEYS = ("measuredTemp", "referenceTemp", "ambientTemp", "currentLoad")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def as_float(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Conversión numérica tolerante (equivalente a Number() en el cliente web)."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return default
        try:
            result = float(text)
        except ValueError:
            return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


@dataclass
class ThermalRecord:
    """Una medición termográfica.

    delta_t se deriva en cada lectura y nunca se persiste.
    """

    unit: str = ""
    station_name: str = ""
    device_location: str = ""
    feeder: str = ""
    inspection_type: str = ""
    phase: str = ""
    measured_temp: float = 0.0
    reference_temp: float = 0.0
    ambient_temp: float = 0.0
    current_load: float = 0.0
    thermal_image_ref: Optional[str] = None
    reference_image_ref: Optional[str] = None
    conclusion: str = ""
    inspector: str = ""
    date: str = ""
    action_plan: Optional[str] = None
    processed_date: Optional[str] = None
    post_temp: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def delta_t(self) -> float:
        return self.measured_temp - self.reference_temp

    @property
    def severity(self) -> SeverityLevel:
        return classify_delta(self.delta_t)

    @property
    def needs_remediation(self) -> bool:
        return needs_remediation(self.delta_t)

    @property
    def has_remediation_data(self) -> bool:
        return bool(self.action_plan or self.processed_date or self.post_temp is not None)

    def match_key(self) -> tuple[str, str, str]:
        """Clave con la que el Gateway localiza la fila a actualizar (no es única)."""
        return (self.station_name, self.device_location, self.date)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ThermalRecord":
        known = set(WIRE_KEYS.values())
        extra = {k: v for k, v in data.items() if k not in known}

        thermal = data.get("thermalImage")
        normal = data.get("normalImage")
        action_plan = data.get("actionPlan")
        processed_date = data.get("processedDate")

        return cls(
            unit=as_text(data.get("unit")),
            station_name=as_text(data.get("stationName")),
            device_location=as_text(data.get("deviceLocation")),
            feeder=as_text(data.get("feeder")),
            inspection_type=as_text(data.get("inspectionType")),
            phase=as_text(data.get("phase")),
            measured_temp=as_float(data.get("measuredTemp")),
            reference_temp=as_float(data.get("referenceTemp")),
            ambient_temp=as_float(data.get("ambientTemp")),
            current_load=as_float(data.get("currentLoad")),
            thermal_image_ref=as_text(thermal) if thermal else None,
            reference_image_ref=as_text(normal) if normal else None,
            conclusion=as_text(data.get("conclusion")),
            inspector=as_text(data.get("inspector")),
            date=as_text(data.get("date")),
            action_plan=as_text(action_plan) if action_plan not in (None, "") else None,
            processed_date=as_text(processed_date) if processed_date not in (None, "") else None,
            post_temp=as_float(data.get("postTemp"), None),
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        for attr, key in WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is None and attr in ("action_plan", "processed_date", "post_temp"):
                continue
            out[key] = value
        return out
