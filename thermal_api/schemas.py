from __future__ import annotations

from datetime import date as Date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .domain.classification import SeverityLevel
from .domain.models import InspectionType, Phase, ThermalRecord


class CamelModel(BaseModel):
    # El cliente web y la hoja usan camelCase
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----------------------------------------------------------------------
# Entrada
# ----------------------------------------------------------------------


class LoginIn(BaseModel):
    unit: Optional[str] = None
    password: Optional[str] = None


class ThermalSubmissionIn(CamelModel):
    station_name: str = Field(..., min_length=1)
    device_location: str = Field(..., min_length=1)
    feeder: str = Field(..., min_length=1)
    inspection_type: InspectionType = InspectionType.PERIODIC
    phase: Phase = Phase.ABC
    measured_temp: float
    reference_temp: float
    ambient_temp: float
    current_load: float
    # Obligatorias, pero se validan a mano para devolver el mensaje del formulario
    thermal_image: Optional[str] = None
    normal_image: Optional[str] = None
    conclusion: str = ""
    inspector: str = ""
    date: str = Field(default_factory=lambda: Date.today().isoformat())
    action_plan: Optional[str] = None
    processed_date: Optional[str] = None
    post_temp: Optional[float] = None

    def to_wire(self, unit: str) -> dict:
        data = self.model_dump(by_alias=True, mode="json")
        data["unit"] = unit
        return data


class ActionPlanUpdateIn(CamelModel):
    station_name: str
    device_location: str
    date: str
    action_plan: str = ""
    processed_date: Optional[str] = None
    post_temp: Optional[float] = None


class FeederIn(BaseModel):
    feeder: str


class ConclusionIn(CamelModel):
    measured_temp: float
    reference_temp: float
    current_load: float = 0.0


# ----------------------------------------------------------------------
# Salida
# ----------------------------------------------------------------------


class RecordOut(CamelModel):
    unit: str
    station_name: str
    device_location: str
    feeder: str
    inspection_type: str
    phase: str
    measured_temp: float
    reference_temp: float
    ambient_temp: float
    current_load: float
    thermal_image: Optional[str] = None
    normal_image: Optional[str] = None
    conclusion: str = ""
    inspector: str = ""
    date: str
    date_display: str
    action_plan: Optional[str] = None
    processed_date: Optional[str] = None
    post_temp: Optional[float] = None
    delta_t: float
    severity: SeverityLevel
    severity_label: str

    @classmethod
    def from_record(cls, record: ThermalRecord) -> "RecordOut":
        from .pipeline.dates import format_vi_date

        return cls(
            unit=record.unit,
            station_name=record.station_name,
            device_location=record.device_location,
            feeder=record.feeder,
            inspection_type=record.inspection_type,
            phase=record.phase,
            measured_temp=record.measured_temp,
            reference_temp=record.reference_temp,
            ambient_temp=record.ambient_temp,
            current_load=record.current_load,
            thermal_image=record.thermal_image_ref,
            normal_image=record.reference_image_ref,
            conclusion=record.conclusion,
            inspector=record.inspector,
            date=record.date,
            date_display=format_vi_date(record.date),
            action_plan=record.action_plan,
            processed_date=record.processed_date,
            post_temp=record.post_temp,
            delta_t=round(record.delta_t, 2),
            severity=record.severity,
            severity_label=record.severity.label,
        )


class RecordListOut(CamelModel):
    unit: str
    records: List[RecordOut] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None


class ActionPlanListOut(CamelModel):
    unit: str
    records: List[RecordOut] = Field(default_factory=list)
    error: Optional[str] = None


class MessageOut(BaseModel):
    success: bool = True
    message: str = ""


class FeederListOut(CamelModel):
    unit: str
    feeders: List[str] = Field(default_factory=list)
    sync_status: str = "idle"
    message: str = ""
