"""Catálogo de xuất tuyến por unidad con caché local.

Lectura: se devuelve la copia local al instante y luego se reconcilia con
la hoja remota; si el remoto falla, la copia local sigue siendo la verdad
visible (estado STALE, no error).

Escrituras en dos fases: primero la llamada remota, y solo si confirma se
toca el estado local. Nunca al revés.

Los eliminados se guardan en memoria (por unidad, más reciente primero)
durante la sesión para poder restaurarlos con un clic.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from ..gateway.client import GatewayClient
from ..gateway.errors import GatewayError, ValidationFailure
from .repository import FeederCacheRepository

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    SYNCED = "success"
    STALE = "stale"


@dataclass
class SyncResult:
    status: SyncStatus
    feeders: List[str]
    message: str = ""


def _dedupe(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


class FeederCatalog:
    def __init__(self, repository: FeederCacheRepository, gateway: GatewayClient):
        self._repo = repository
        self._gateway = gateway
        self._deleted: Dict[str, List[str]] = {}

    def cached(self, unit: str) -> List[str]:
        return self._repo.feeders_for_unit(unit)

    def recently_deleted(self, unit: str) -> List[str]:
        return list(self._deleted.get(unit, []))

    async def sync(self, unit: str) -> SyncResult:
        try:
            library = await self._gateway.get_feeders()
        except GatewayError as e:
            logger.warning("[FEEDERS] Sync failed for unit=%s, keeping cached copy: %s", unit, e.message)
            return SyncResult(SyncStatus.STALE, self.cached(unit), e.message)

        remote = _dedupe(library.get(unit, []))
        self._repo.update_unit(unit, remote)
        logger.info("[FEEDERS] Synced unit=%s feeders=%d", unit, len(remote))
        return SyncResult(SyncStatus.SYNCED, remote)

    async def add(self, unit: str, name: str) -> List[str]:
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationFailure("Vui lòng nhập tên xuất tuyến")

        current = self.cached(unit)
        if trimmed in current:
            raise ValidationFailure("Xuất tuyến này đã tồn tại!")

        # Fase 1: remoto. Si lanza, el estado local no se toca.
        await self._gateway.manage_feeder("addFeeder", unit, trimmed)

        # Fase 2: local
        updated = current + [trimmed]
        self._repo.update_unit(unit, updated)
        return updated

    async def delete(self, unit: str, name: str) -> List[str]:
        current = self.cached(unit)

        await self._gateway.manage_feeder("deleteFeeder", unit, name)

        updated = [f for f in current if f != name]
        self._repo.update_unit(unit, updated)
        self._deleted.setdefault(unit, []).insert(0, name)
        return updated

    async def restore(self, unit: str, name: str) -> List[str]:
        current = self.cached(unit)
        if name in current:
            self._forget_deleted(unit, name)
            return current

        await self._gateway.manage_feeder("addFeeder", unit, name)

        updated = current + [name]
        self._repo.update_unit(unit, updated)
        self._forget_deleted(unit, name)
        return updated

    def _forget_deleted(self, unit: str, name: str) -> None:
        history = self._deleted.get(unit)
        if history:
            self._deleted[unit] = [f for f in history if f != name]
