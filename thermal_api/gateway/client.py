"""Cliente HTTP del Gateway (Apps Script sobre Google Sheets).

Todas las llamadas son asíncronas (httpx.AsyncClient) y secuenciales por
vista. Las lecturas llevan timeout duro (15 s por defecto); no hay retry
automático, el reintento es manual desde la vista.

Mapeo de fallos:
- httpx.TimeoutException      -> GatewayTimeout
- httpx.RequestError / 5xx    -> NetworkUnreachable
- cuerpo no JSON / forma rara -> MalformedResponse
- {"success": false}          -> LogicalFailure
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from ..metrics import GATEWAY_CALLS, GATEWAY_LATENCY
from ..pipeline.normalization import normalize_records
from .errors import (
    GatewayError,
    GatewayTimeout,
    LogicalFailure,
    MalformedResponse,
    NetworkUnreachable,
    RecordNotFound,
    ValidationFailure,
)
from .payloads import build_action_plan_payload, build_feeder_payload, build_submit_payload
from .responses import ActionResult, ReadKind, parse_action_text, parse_read_payload

logger = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain;charset=utf-8"


def _cache_buster() -> int:
    return int(time.time() * 1000)


class GatewayClient:
    """Acceso al endpoint de scripting remoto."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        sheet_name: str = "xuattuyen",
        http_client: Optional[httpx.AsyncClient] = None,
        cache_buster: Callable[[], int] = _cache_buster,
    ):
        self._base_url = (base_url or "").strip()
        self._timeout = timeout_seconds
        self._sheet_name = sheet_name
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
        )
        self._owns_client = http_client is None
        self._cache_buster = cache_buster

    @property
    def configured(self) -> bool:
        return bool(self._base_url)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _require_url(self) -> str:
        if not self._base_url:
            raise ValidationFailure("Chưa cấu hình URL máy chủ dữ liệu.")
        return self._base_url

    async def _send(
        self,
        action: str,
        method: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = self._require_url()
        content = None
        headers = None
        if body is not None:
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")
            headers = {"Content-Type": TEXT_PLAIN}

        start = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                content=content,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            GATEWAY_CALLS.labels(action=action, outcome="timeout").inc()
            logger.warning("[GATEWAY] action=%s timed out after %.1fs: %s", action, self._timeout, e)
            raise GatewayTimeout() from e
        except httpx.RequestError as e:
            GATEWAY_CALLS.labels(action=action, outcome="network").inc()
            logger.error("[GATEWAY] action=%s network error: %s", action, e)
            raise NetworkUnreachable() from e
        finally:
            GATEWAY_LATENCY.labels(action=action).observe(time.perf_counter() - start)

        return response

    def _ensure_ok(self, action: str, response: httpx.Response) -> None:
        if response.is_success:
            return
        GATEWAY_CALLS.labels(action=action, outcome="network").inc()
        logger.error("[GATEWAY] action=%s HTTP %s", action, response.status_code)
        raise NetworkUnreachable(f"Máy chủ phản hồi lỗi: {response.status_code}")

    def _malformed(self, action: str, message: Optional[str] = None) -> MalformedResponse:
        GATEWAY_CALLS.labels(action=action, outcome="malformed").inc()
        logger.error("[GATEWAY] action=%s malformed response", action)
        return MalformedResponse(message)

    def _logical(self, action: str, error: LogicalFailure) -> LogicalFailure:
        GATEWAY_CALLS.labels(action=action, outcome="logical").inc()
        logger.warning("[GATEWAY] action=%s success=false message=%s", action, error.message)
        return error

    # ------------------------------------------------------------------
    # Lectura de registros
    # ------------------------------------------------------------------

    async def read_records(self) -> List[Dict[str, Any]]:
        """Lee y normaliza todos los registros de la hoja."""
        action = "read"
        response = await self._send(
            action, "GET", params={"action": action, "_t": self._cache_buster()}
        )
        self._ensure_ok(action, response)

        try:
            payload = response.json()
        except ValueError as e:
            raise self._malformed(action) from e

        result = parse_read_payload(payload)
        if result.kind is ReadKind.FAILURE:
            raise self._logical(action, LogicalFailure(result.message))
        if not result.ok:
            raise self._malformed(action)

        records = normalize_records(result.rows)
        GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
        logger.info("[GATEWAY] read shape=%s rows=%d records=%d", result.kind.value, len(result.rows), len(records))
        return records

    # ------------------------------------------------------------------
    # Escrituras
    # ------------------------------------------------------------------

    async def submit_record(self, record: Dict[str, Any]) -> str:
        """Envía un registro nuevo. Fire-and-forget: la respuesta no se lee."""
        action = "submitThermal"
        payload = build_submit_payload(record)
        try:
            await self._send(action, "POST", body=payload)
        except NetworkUnreachable as e:
            raise NetworkUnreachable("Không thể kết nối với máy chủ Google.") from e

        GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
        logger.info(
            "[GATEWAY] submitThermal dispatched unit=%s station=%s date=%s",
            record.get("unit"), record.get("stationName"), record.get("date"),
        )
        return "Dữ liệu đã được gửi đi! Vui lòng kiểm tra Google Sheet sau vài giây."

    async def update_action_plan(
        self,
        *,
        station_name: str,
        device_location: str,
        date: str,
        action_plan: str,
        processed_date: Optional[str] = None,
        post_temp: Optional[float] = None,
    ) -> ActionResult:
        action = "updateActionPlan"
        payload = build_action_plan_payload(
            station_name=station_name,
            device_location=device_location,
            date=date,
            action_plan=action_plan,
            processed_date=processed_date,
            post_temp=post_temp,
        )
        response = await self._send(action, "POST", body=payload)
        self._ensure_ok(action, response)

        result = parse_action_text(response.text)
        if result is None:
            raise self._malformed(action)
        if not result.success:
            error: LogicalFailure = (
                LogicalFailure(result.message) if result.message else RecordNotFound()
            )
            raise self._logical(action, error)

        GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
        result.message = "Kế hoạch xử lý đã được cập nhật thành công!"
        return result

    # ------------------------------------------------------------------
    # Catálogo de xuất tuyến (feeders)
    # ------------------------------------------------------------------

    async def get_feeders(self) -> Dict[str, List[str]]:
        action = "getFeeders"
        response = await self._send(
            action, "GET", params={"action": action, "_t": self._cache_buster()}
        )
        self._ensure_ok(action, response)

        try:
            body = response.json()
        except ValueError as e:
            raise self._malformed(action) from e

        if not isinstance(body, dict):
            raise self._malformed(action)
        if not body.get("success"):
            raise self._logical(action, LogicalFailure(body.get("message") or "Không thể tải danh sách xuất tuyến"))

        data = body.get("data")
        if not isinstance(data, dict):
            raise self._malformed(action)

        library: Dict[str, List[str]] = {}
        for unit, feeders in data.items():
            if isinstance(feeders, list):
                library[str(unit)] = [str(f) for f in feeders if f is not None and str(f).strip()]
        GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
        return library

    async def manage_feeder(self, action: str, unit: str, feeder: str) -> ActionResult:
        """addFeeder / deleteFeeder.

        Un deleteFeeder con success:false significa normalmente que la fila
        ya no existe; a efectos de la app se trata como éxito.
        """
        if action not in ("addFeeder", "deleteFeeder"):
            raise ValueError(f"Unsupported feeder action: {action}")

        payload = build_feeder_payload(action, unit, feeder, self._sheet_name)
        logger.info("[GATEWAY] %s unit=%s feeder=%s", action, payload["unit"], payload["feeder"])
        try:
            response = await self._send(action, "POST", body=payload)
        except NetworkUnreachable as e:
            raise NetworkUnreachable("Lỗi kết nối máy chủ") from e

        result = parse_action_text(response.text)
        if result is None:
            raise self._malformed(action, "Lỗi phản hồi từ máy chủ")

        if result.success:
            GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
            result.message = result.message or "Thành công"
            return result

        if action == "deleteFeeder":
            GATEWAY_CALLS.labels(action=action, outcome="ok").inc()
            return ActionResult(
                success=True,
                message=result.message or "Đã xóa hoặc không tìm thấy",
                raw=result.raw,
            )

        raise self._logical(action, LogicalFailure(result.message or "Thất bại trên máy chủ"))


__all__ = ["GatewayClient", "GatewayError"]
