"""Clasificación de severidad por diferencia de temperatura (deltaT).

Umbrales fijos de contrato: 5, 15 y 30 °C. Cada vista que muestra
severidad (listado, plan de tratamiento, dashboard, conclusión sugerida)
usa esta función; ninguna vista redefine los umbrales.

Bandas semiabiertas por abajo:
- d < 5            -> NORMAL
- 5 <= d < 15      -> MONITOR
- 15 <= d < 30     -> SERIOUS
- d >= 30          -> EMERGENCY
"""

from __future__ import annotations

from enum import Enum


MONITOR_THRESHOLD = 5.0
SERIOUS_THRESHOLD = 15.0
EMERGENCY_THRESHOLD = 30.0

# A partir de aquí una lectura exige plan de tratamiento.
REMEDIATION_THRESHOLD = SERIOUS_THRESHOLD


class SeverityLevel(str, Enum):
    NORMAL = "Normal"
    MONITOR = "Monitor"
    SERIOUS = "Serious"
    EMERGENCY = "Emergency"

    @property
    def label(self) -> str:
        return SEVERITY_LABELS[self]

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self]

    @property
    def rank(self) -> int:
        return _ORDER.index(self)


_ORDER = [
    SeverityLevel.NORMAL,
    SeverityLevel.MONITOR,
    SeverityLevel.SERIOUS,
    SeverityLevel.EMERGENCY,
]

SEVERITY_LABELS = {
    SeverityLevel.NORMAL: "Bình thường",
    SeverityLevel.MONITOR: "Theo dõi",
    SeverityLevel.SERIOUS: "Nghiêm trọng",
    SeverityLevel.EMERGENCY: "Nguy cấp",
}

SEVERITY_COLORS = {
    SeverityLevel.NORMAL: "#10b981",
    SeverityLevel.MONITOR: "#3b82f6",
    SeverityLevel.SERIOUS: "#f59e0b",
    SeverityLevel.EMERGENCY: "#ef4444",
}


def severity_levels() -> list[SeverityLevel]:
    """Niveles en orden creciente de gravedad."""
    return list(_ORDER)


def classify_delta(delta: float) -> SeverityLevel:
    if delta < MONITOR_THRESHOLD:
        return SeverityLevel.NORMAL
    if delta < SERIOUS_THRESHOLD:
        return SeverityLevel.MONITOR
    if delta < EMERGENCY_THRESHOLD:
        return SeverityLevel.SERIOUS
    return SeverityLevel.EMERGENCY


def classify(measured: float, reference: float) -> SeverityLevel:
    """Clasifica una medición por su deltaT = measured - reference."""
    return classify_delta(float(measured) - float(reference))


def needs_remediation(delta: float) -> bool:
    return delta >= REMEDIATION_THRESHOLD
