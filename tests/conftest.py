"""Fixtures compartidas.

FakeSheet imita el endpoint de scripting remoto (lectura, escrituras y
catálogo de xuất tuyến) detrás de un httpx.MockTransport, de modo que
GatewayClient se prueba con tráfico HTTP real sin red.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from common.config import Settings
from thermal_api.domain.models import ThermalRecord
from thermal_api.gateway.client import GatewayClient


GATEWAY_URL = "https://script.test/macros/s/abc/exec"
UNIT = "Điện lực Sơn Trà"
OTHER_UNIT = "Điện lực Hải Châu"
PASSWORD = "st-2026"


def _unmark(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("'"):
        return value[1:]
    return value


class FakeSheet:
    """Hoja remota en memoria."""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        feeders: Optional[Dict[str, List[str]]] = None,
    ):
        self.rows: List[Dict[str, Any]] = list(rows or [])
        self.feeders: Dict[str, List[str]] = {u: list(f) for u, f in (feeders or {}).items()}
        self.requests: List[httpx.Request] = []
        self.posted: List[Dict[str, Any]] = []
        # Si se define, reemplaza la respuesta de la acción indicada
        self.overrides: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            action = request.url.params.get("action")
            body = None
        else:
            body = json.loads(request.content.decode("utf-8"))
            self.posted.append(body)
            action = body.get("action")

        if action in self.overrides:
            return self.overrides[action](request)

        if action == "read":
            return httpx.Response(200, json=self.rows)
        if action == "getFeeders":
            return httpx.Response(200, json={"success": True, "data": self.feeders})
        if action == "submitThermal":
            row = {k: v for k, v in body.items() if k != "action"}
            self.rows.append(row)
            return httpx.Response(200, json={"success": True})
        if action == "updateActionPlan":
            return self._update_action_plan(body)
        if action == "addFeeder":
            self.feeders.setdefault(body["unit"], []).append(body["feeder"])
            return httpx.Response(200, json={"success": True, "message": "Đã thêm"})
        if action == "deleteFeeder":
            current = self.feeders.get(body["unit"], [])
            if body["feeder"] not in current:
                return httpx.Response(200, json={"success": False, "message": "Không tìm thấy"})
            current.remove(body["feeder"])
            return httpx.Response(200, json={"success": True})
        return httpx.Response(400, text="unknown action")

    def _update_action_plan(self, body: Dict[str, Any]) -> httpx.Response:
        key = (body["stationName"], body["deviceLocation"], body["date"])
        for row in self.rows:
            row_key = (
                _unmark(row.get("stationName")),
                _unmark(row.get("deviceLocation")),
                _unmark(row.get("date")),
            )
            if row_key == key:
                row["actionPlan"] = body.get("actionPlan", "")
                if "processedDate" in body:
                    row["processedDate"] = body["processedDate"]
                if "postTemp" in body:
                    row["postTemp"] = body["postTemp"]
                return httpx.Response(200, json={"success": True})
        return httpx.Response(200, json={"success": False})

    def actions(self) -> List[str]:
        out = []
        for request in self.requests:
            if request.method == "GET":
                out.append(request.url.params.get("action"))
            else:
                out.append(json.loads(request.content.decode("utf-8")).get("action"))
        return out


def make_row(**overrides: Any) -> Dict[str, Any]:
    """Fila cruda tal como la devuelve la hoja (claves camelCase)."""
    row = {
        "unit": UNIT,
        "stationName": "'TBA Mân Thái",
        "deviceLocation": "'Cột 12/5",
        "feeder": "'471",
        "inspectionType": "Định kỳ",
        "phase": "ABC",
        "measuredTemp": 45,
        "referenceTemp": 38,
        "ambientTemp": 31,
        "currentLoad": 120,
        "thermalImage": "https://drive.google.com/file/d/1AbCdEfGhIjKlMnOpQrStUvWxYz012345/view",
        "normalImage": "https://drive.google.com/file/d/1ZyXwVuTsRqPoNmLkJiHgFeDcBa987654/view",
        "conclusion": "",
        "inspector": "Nguyễn Văn A",
        "date": "2026-03-14",
    }
    row.update(overrides)
    return row


def make_record(**overrides: Any) -> ThermalRecord:
    defaults = {
        "unit": UNIT,
        "station_name": "TBA Mân Thái",
        "device_location": "Cột 12/5",
        "feeder": "471",
        "inspection_type": "Định kỳ",
        "phase": "ABC",
        "measured_temp": 45.0,
        "reference_temp": 38.0,
        "ambient_temp": 31.0,
        "current_load": 120.0,
        "inspector": "Nguyễn Văn A",
        "date": "2026-03-14",
    }
    defaults.update(overrides)
    return ThermalRecord(**defaults)


def make_gateway(sheet: FakeSheet, **kwargs: Any) -> GatewayClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(sheet.handler))
    return GatewayClient(GATEWAY_URL, http_client=client, cache_buster=lambda: 1700000000000, **kwargs)


def unit_headers(unit: str = UNIT, password: str = PASSWORD) -> Dict[str, str]:
    from urllib.parse import quote

    return {"X-Unit": quote(unit), "X-Unit-Password": quote(password)}


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sheet() -> FakeSheet:
    return FakeSheet(
        rows=[
            make_row(),
            make_row(deviceLocation="'Cột 7", measuredTemp=60, referenceTemp=38, date="2026-04-02"),
            make_row(unit=OTHER_UNIT, stationName="'TBA Hòa Khánh", date="2026-02-01"),
        ],
        feeders={UNIT: ["471", "472"], OTHER_UNIT: ["473"]},
    )


@pytest.fixture
def gateway(sheet: FakeSheet) -> GatewayClient:
    return make_gateway(sheet)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        gateway_url=GATEWAY_URL,
        fetch_timeout_seconds=15,
        image_attempt_timeout_seconds=5,
        feeder_cache_url="sqlite://",
        feeder_sheet_name="xuattuyen",
        unit_passwords={UNIT: PASSWORD, OTHER_UNIT: "hc-2026"},
        unit_feeders={UNIT: ["471"]},
    )
