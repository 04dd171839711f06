"""Almacén local del catálogo de xuất tuyến (feeders).

Guarda la librería completa {unit: [feeder, ...]} como JSON bajo una clave
versionada. Cambiar la forma guardada implica cambiar SCHEMA_KEY: las
copias viejas quedan huérfanas en lugar de migrarse a medias.
"""

from __future__ import annotations

import json
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SCHEMA_KEY = "qnpc_feeder_lib_v3"

FeederLibrary = Dict[str, List[str]]


class FeederCacheRepository:
    """Persistencia clave-valor del catálogo (tabla kv_store)."""

    def __init__(
        self,
        engine: Engine,
        *,
        defaults: Optional[Mapping[str, Sequence[str]]] = None,
        default_feeders: Sequence[str] = (),
        key: str = SCHEMA_KEY,
    ):
        self._engine = engine
        self._defaults = {u: list(f) for u, f in (defaults or {}).items()}
        self._default_feeders = list(default_feeders)
        self._key = key
        self._ensure_table()

    @property
    def key(self) -> str:
        return self._key

    def _ensure_table(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key VARCHAR(255) PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
            )

    def load_library(self) -> FeederLibrary:
        """Lee la librería guardada; sin datos o con datos corruptos devuelve los defaults."""
        with self._engine.connect() as conn:
            row = conn.execute(
                text("SELECT value FROM kv_store WHERE key = :key"),
                {"key": self._key},
            ).fetchone()

        if not row:
            return {u: list(f) for u, f in self._defaults.items()}

        try:
            stored = json.loads(row[0])
        except ValueError:
            logger.error("[FEEDERS] Error parsing feeder library key=%s", self._key)
            return {u: list(f) for u, f in self._defaults.items()}

        if not isinstance(stored, dict):
            logger.error("[FEEDERS] Unexpected feeder library shape key=%s", self._key)
            return {u: list(f) for u, f in self._defaults.items()}

        return {
            str(unit): [str(f) for f in feeders]
            for unit, feeders in stored.items()
            if isinstance(feeders, list)
        }

    def save_library(self, library: Mapping[str, Sequence[str]]) -> None:
        payload = json.dumps({u: list(f) for u, f in library.items()}, ensure_ascii=False)
        with self._engine.begin() as conn:
            conn.execute(text("DELETE FROM kv_store WHERE key = :key"), {"key": self._key})
            conn.execute(
                text("INSERT INTO kv_store (key, value) VALUES (:key, :value)"),
                {"key": self._key, "value": payload},
            )

    def feeders_for_unit(self, unit: str) -> List[str]:
        library = self.load_library()
        if unit in library:
            return list(library[unit])
        return list(self._defaults.get(unit, self._default_feeders))

    def update_unit(self, unit: str, feeders: Sequence[str]) -> FeederLibrary:
        library = self.load_library()
        library[unit] = list(feeders)
        self.save_library(library)
        return library
