"""Dominio: registros termográficos y clasificación de severidad."""

from .classification import (
    EMERGENCY_THRESHOLD,
    MONITOR_THRESHOLD,
    REMEDIATION_THRESHOLD,
    SERIOUS_THRESHOLD,
    SeverityLevel,
    classify,
    classify_delta,
    severity_levels,
)
from .models import InspectionType, Phase, ThermalRecord

__all__ = [
    "SeverityLevel",
    "classify",
    "classify_delta",
    "severity_levels",
    "MONITOR_THRESHOLD",
    "SERIOUS_THRESHOLD",
    "EMERGENCY_THRESHOLD",
    "REMEDIATION_THRESHOLD",
    "InspectionType",
    "Phase",
    "ThermalRecord",
]
