"""Controladores de vista: fetch -> normalización -> filtros -> estado.

Cada controlador guarda su propia copia de los datos (no hay estado
compartido entre vistas) y un FetchGeneration para descartar respuestas
de refrescos ya superados.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
import datetime
from typing import Any, Dict, List, Optional

from ..domain.classification import SeverityLevel
from ..domain.models import ThermalRecord
from ..gateway.client import GatewayClient
from ..gateway.errors import GatewayError, RecordNotFound, ValidationFailure
from ..metrics import STALE_RESPONSES
from ..pipeline.filters import (
    ALL_UNITS,
    LIST_SEARCH_FIELDS,
    PLAN_SEARCH_FIELDS,
    count_by_severity,
    filter_by_severity,
    filter_by_unit,
    filter_plan_candidates,
    filter_valid,
    search,
    sort_latest_first,
)
from ..stats.dashboard import build_dashboard
from .generation import FetchGeneration

logger = logging.getLogger(__name__)


@dataclass
class FetchOutcome:
    records: List[ThermalRecord] = field(default_factory=list)
    error: Optional[GatewayError] = None
    stale: bool = False

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


class BaseRecordsController:
    view_name = "base"

    def __init__(self, gateway: GatewayClient):
        self._gateway = gateway
        self._generation = FetchGeneration()
        self._records: List[ThermalRecord] = []
        self._error: Optional[GatewayError] = None

    @property
    def records(self) -> List[ThermalRecord]:
        return list(self._records)

    @property
    def error(self) -> Optional[GatewayError]:
        return self._error

    def select(self, records: List[ThermalRecord]) -> List[ThermalRecord]:
        return filter_valid(records)

    async def refresh(self) -> FetchOutcome:
        token = self._generation.issue()
        error: Optional[GatewayError] = None
        try:
            raw = await self._gateway.read_records()
        except GatewayError as e:
            logger.warning("[VIEW:%s] fetch failed: %s", self.view_name, e.message)
            raw = []
            error = e

        if not self._generation.is_current(token):
            STALE_RESPONSES.labels(view=self.view_name).inc()
            logger.info(
                "[VIEW:%s] discarding stale response token=%d latest=%d",
                self.view_name, token, self._generation.latest,
            )
            return FetchOutcome(records=self.records, error=self._error, stale=True)

        self._records = self.select([ThermalRecord.from_dict(r) for r in raw])
        self._error = error
        return FetchOutcome(records=self.records, error=error)


class RecordListController(BaseRecordsController):
    """Listado de resultados de la unidad activa."""

    view_name = "records"

    def __init__(self, gateway: GatewayClient, unit: str):
        super().__init__(gateway)
        self.unit = unit

    def select(self, records: List[ThermalRecord]) -> List[ThermalRecord]:
        return sort_latest_first(filter_by_unit(filter_valid(records), self.unit))

    def page(self, query: Optional[str] = None, level: Optional[SeverityLevel] = None) -> Dict[str, Any]:
        matches = filter_by_severity(search(self._records, query, LIST_SEARCH_FIELDS), level)
        return {"records": matches, "counts": count_by_severity(self._records)}


class ActionPlanController(BaseRecordsController):
    """Editor de plan de tratamiento: defectos (deltaT >= 15) o ya planificados."""

    view_name = "action_plans"

    def __init__(self, gateway: GatewayClient, unit: str):
        super().__init__(gateway)
        self.unit = unit

    def select(self, records: List[ThermalRecord]) -> List[ThermalRecord]:
        return sort_latest_first(filter_plan_candidates(filter_valid(records), self.unit))

    def page(self, query: Optional[str] = None) -> List[ThermalRecord]:
        return search(self._records, query, PLAN_SEARCH_FIELDS)

    async def update(
        self,
        *,
        station_name: str,
        device_location: str,
        date: str,
        action_plan: str,
        processed_date: Optional[str] = None,
        post_temp: Optional[float] = None,
    ) -> str:
        """Actualiza el plan de una medición.

        La clave (trạm, vị trí, ngày) no es única en la hoja. Antes de
        escribir se relee la hoja y se exige exactamente una coincidencia;
        con varias no se actualiza nada.
        """
        key = (station_name, device_location, date)
        raw = await self._gateway.read_records()
        matches = [
            r for r in filter_valid(ThermalRecord.from_dict(item) for item in raw)
            if r.match_key() == key
        ]
        if not matches:
            raise RecordNotFound()
        if len(matches) > 1:
            logger.warning("[VIEW:%s] ambiguous match key=%s count=%d", self.view_name, key, len(matches))
            raise ValidationFailure(
                "Có nhiều bản ghi trùng Trạm, Vị trí và Ngày đo; không thể cập nhật an toàn."
            )
        if matches[0].unit != self.unit:
            raise RecordNotFound()

        result = await self._gateway.update_action_plan(
            station_name=station_name,
            device_location=device_location,
            date=date,
            action_plan=action_plan,
            processed_date=processed_date,
            post_temp=post_temp,
        )

        for record in self._records:
            if record.match_key() == key:
                record.action_plan = action_plan or None
                record.processed_date = processed_date or None
                record.post_temp = post_temp
        return result.message


class DashboardController(BaseRecordsController):
    """Estadísticas; admite la unidad o ALL_UNITS (toda la compañía)."""

    view_name = "dashboard"

    def stats(self, scope: str, today: Optional[datetime.date] = None) -> Dict[str, Any]:
        scoped = filter_by_unit(self._records, scope)
        return build_dashboard(scoped, scope=scope, today=today)


__all__ = [
    "ALL_UNITS",
    "FetchOutcome",
    "BaseRecordsController",
    "RecordListController",
    "ActionPlanController",
    "DashboardController",
]
