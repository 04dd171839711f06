from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine


logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    # sqlite en memoria necesita una única conexión compartida,
    # si no cada conexión ve una base distinta.
    kwargs: dict = {"future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            from sqlalchemy.pool import StaticPool

            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, pool_pre_ping=True, **kwargs)

    # Test de conexión: ayuda a ver en logs si el servicio llega al almacén local
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("[DB] Test de conexión OK url=%s", engine.url.render_as_string(hide_password=True))
    except Exception:
        logger.exception("[DB] Test de conexión FALLÓ")

    return engine
