"""Login por unidad."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ..auth.units import UnitDirectory, get_unit_directory
from ..schemas import LoginIn, MessageOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=MessageOut)
def login(payload: LoginIn, directory: UnitDirectory = Depends(get_unit_directory)) -> MessageOut:
    unit = directory.verify(payload.unit, payload.password)
    return MessageOut(success=True, message=unit)


@router.get("/units", response_model=List[str])
def units(directory: UnitDirectory = Depends(get_unit_directory)) -> List[str]:
    return directory.units()
