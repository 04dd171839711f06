"""Acceso al Gateway remoto (endpoint de scripting sobre la hoja de cálculo).

Estructura modular:
- client.py: GatewayClient (httpx) con lectura, envío y catálogo
- responses.py: parseo de las formas de respuesta a un resultado único
- payloads.py: cuerpos POST con marcadores de escape
- errors.py: taxonomía de errores
"""

from .client import GatewayClient
from .errors import (
    GatewayError,
    GatewayTimeout,
    LogicalFailure,
    MalformedResponse,
    NetworkUnreachable,
    RecordNotFound,
    ValidationFailure,
)
from .responses import ActionResult, ReadKind, ReadResult, parse_action_text, parse_read_payload

__all__ = [
    "GatewayClient",
    "GatewayError",
    "GatewayTimeout",
    "LogicalFailure",
    "MalformedResponse",
    "NetworkUnreachable",
    "RecordNotFound",
    "ValidationFailure",
    "ActionResult",
    "ReadKind",
    "ReadResult",
    "parse_action_text",
    "parse_read_payload",
]
