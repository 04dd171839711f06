"""Acceso por unidad: tabla estática unidad -> contraseña.

La tabla se carga de la configuración (UNIT_PASSWORDS). Si está vacía
nadie puede entrar.
"""

from __future__ import annotations

import hmac
import logging
from typing import List, Mapping
from urllib.parse import unquote

from fastapi import Depends, Header, HTTPException, Request

from ..gateway.errors import ValidationFailure

logger = logging.getLogger(__name__)


class UnitDirectory:
    def __init__(self, passwords: Mapping[str, str]):
        self._passwords = dict(passwords)

    def units(self) -> List[str]:
        return sorted(self._passwords)

    def verify(self, unit: str | None, password: str | None) -> str:
        """Valida credenciales y devuelve la unidad; ValidationFailure si no."""
        if not unit:
            raise ValidationFailure("Vui lòng chọn đơn vị công tác")
        if not password:
            raise ValidationFailure("Vui lòng nhập mật khẩu")

        expected = self._passwords.get(unit)
        if expected is None or not hmac.compare_digest(expected.encode("utf-8"), password.encode("utf-8")):
            logger.warning("[AUTH] Failed login for unit=%s", unit)
            raise ValidationFailure("Mật khẩu không chính xác")
        return unit


def get_unit_directory(request: Request) -> UnitDirectory:
    return request.app.state.units


def require_unit(
    x_unit: str | None = Header(default=None, alias="X-Unit"),
    x_unit_password: str | None = Header(default=None, alias="X-Unit-Password"),
    directory: UnitDirectory = Depends(get_unit_directory),
) -> str:
    # Las cabeceras HTTP son latin-1: el cliente envía el nombre de unidad percent-encoded
    unit = unquote(x_unit) if x_unit else None
    password = unquote(x_unit_password) if x_unit_password else None
    try:
        return directory.verify(unit, password)
    except ValidationFailure as e:
        raise HTTPException(status_code=401, detail=e.message)
