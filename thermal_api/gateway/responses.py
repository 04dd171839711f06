"""Parseo de respuestas del Gateway a una forma interna única.

El endpoint de lectura puede devolver:
- un array desnudo de registros
- {"data": [...]}
- {"rows": [...]}
- {"success": false, "message": "..."}

Cualquier otra cosa es MALFORMED: lista vacía + error reportado.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ReadKind(str, Enum):
    ARRAY = "array"
    DATA = "data"
    ROWS = "rows"
    FAILURE = "failure"
    MALFORMED = "malformed"


@dataclass
class ReadResult:
    kind: ReadKind
    rows: List[Any] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind in (ReadKind.ARRAY, ReadKind.DATA, ReadKind.ROWS)


def parse_read_payload(payload: Any) -> ReadResult:
    if isinstance(payload, list):
        return ReadResult(ReadKind.ARRAY, rows=payload)

    if isinstance(payload, dict):
        if payload.get("success") is False:
            return ReadResult(ReadKind.FAILURE, message=payload.get("message") or None)
        if isinstance(payload.get("data"), list):
            return ReadResult(ReadKind.DATA, rows=payload["data"])
        if isinstance(payload.get("rows"), list):
            return ReadResult(ReadKind.ROWS, rows=payload["rows"])

    return ReadResult(ReadKind.MALFORMED, message="Unexpected payload shape")


@dataclass
class ActionResult:
    """Resultado {success, message} de una escritura leída."""

    success: bool
    message: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


def parse_action_text(text: str) -> Optional[ActionResult]:
    """Parsea el cuerpo de una escritura.

    Apps Script a veces devuelve HTML o texto plano; si el JSON no parsea
    pero el texto contiene "success":true se considera éxito. Devuelve None
    si no se puede interpretar.
    """
    try:
        body = json.loads(text)
    except ValueError:
        if '"success":true' in text:
            return ActionResult(success=True)
        return None

    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("error") or ""
    return ActionResult(success=bool(body.get("success")), message=str(message), raw=body)
