"""Envío del formulario de medición.

Las validaciones de datos obligatorios corren antes de cualquier llamada de
red y bloquean el envío. El envío en sí es fire-and-forget: el éxito se
asume en cuanto la petición sale.
"""

from __future__ import annotations

from ..gateway.client import GatewayClient
from ..gateway.errors import ValidationFailure
from ..schemas import ThermalSubmissionIn


def validate_submission(submission: ThermalSubmissionIn, unit: str) -> None:
    if not unit or not unit.strip():
        raise ValidationFailure("Vui lòng chọn đơn vị công tác")
    if not submission.thermal_image:
        raise ValidationFailure("Vui lòng chọn Ảnh nhiệt (Bắt buộc)")
    if not submission.normal_image:
        raise ValidationFailure("Vui lòng chọn Ảnh tham chiếu (Bắt buộc)")


async def submit_measurement(
    gateway: GatewayClient,
    submission: ThermalSubmissionIn,
    unit: str,
) -> str:
    validate_submission(submission, unit)
    return await gateway.submit_record(submission.to_wire(unit))
