"""Normalización de registros crudos devueltos por el Gateway.

Al enviar, ciertos campos de texto se prefijan con una comilla simple para
que la hoja de cálculo no los interprete como fecha o número (p.ej. "12/5").
Al leer se quita ese único marcador. postTemp se convierte a número o se
elimina si no hay valor.

La función es pura y total. Sobre datos ya normalizados (sin marcador)
no cambia nada.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..domain.models import as_float


ESCAPE_MARKER = "'"

MARKED_TEXT_FIELDS = (
    "stationName",
    "deviceLocation",
    "feeder",
    "actionPlan",
    "processedDate",
    "date",
)


def strip_marker(value: Any) -> Any:
    """Quita un único marcador inicial si el valor es texto."""
    if isinstance(value, str) and value.startswith(ESCAPE_MARKER):
        return value[1:]
    return value


def add_marker(value: str) -> str:
    return f"{ESCAPE_MARKER}{value}"


def normalize_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(raw)
    for key in MARKED_TEXT_FIELDS:
        if key in record:
            record[key] = strip_marker(record[key])

    if "postTemp" in record:
        post_temp = as_float(record["postTemp"], None)
        if post_temp is None:
            del record["postTemp"]
        else:
            record["postTemp"] = post_temp
    return record


def normalize_records(raw: Iterable[Any]) -> List[Dict[str, Any]]:
    """Normaliza una secuencia cruda; los elementos que no son objetos se descartan."""
    return [normalize_record(item) for item in raw if isinstance(item, dict)]
