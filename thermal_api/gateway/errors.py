"""Taxonomía de errores del Gateway.

Todas las excepciones se capturan en el borde HTTP (ver main.py) y se
convierten en un mensaje para el operador; ninguna llega como fallo no
controlado.
"""

from __future__ import annotations


class GatewayError(Exception):
    kind: str = "gateway_error"
    status_code: int = 502
    default_message: str = "Không thể kết nối với máy chủ dữ liệu."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class NetworkUnreachable(GatewayError):
    kind = "network_unreachable"
    status_code = 502
    default_message = "Không thể kết nối với máy chủ dữ liệu."


class GatewayTimeout(GatewayError):
    kind = "timeout"
    status_code = 504
    default_message = "Yêu cầu quá hạn (Timeout). Vui lòng kiểm tra kết nối mạng hoặc URL script."


class MalformedResponse(GatewayError):
    kind = "malformed_response"
    status_code = 502
    default_message = "Phản hồi từ máy chủ không đúng định dạng JSON."


class LogicalFailure(GatewayError):
    """El servidor respondió success:false."""

    kind = "logical_failure"
    status_code = 409
    default_message = "Máy chủ báo lỗi không xác định."


class RecordNotFound(LogicalFailure):
    kind = "not_found"
    status_code = 404
    default_message = "Không tìm thấy dữ liệu khớp để cập nhật. Vui lòng kiểm tra lại."


class ValidationFailure(GatewayError):
    """Falta un dato obligatorio; se detecta antes de cualquier llamada de red."""

    kind = "validation_failure"
    status_code = 422
    default_message = "Dữ liệu không hợp lệ."
