"""Conclusión sugerida para una medición.

Si AI_EXPLAINER_URL está configurado se pide una frase corta al servicio
externo; si no está o falla, se usa una conclusión determinista basada en
la misma clasificación que usan las vistas. La conclusión nunca bloquea el
formulario: ningún error sale de aquí.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..domain.classification import SeverityLevel, classify

logger = logging.getLogger(__name__)

_ACTIONS = {
    SeverityLevel.NORMAL: "tiếp tục theo dõi định kỳ.",
    SeverityLevel.MONITOR: "tăng tần suất kiểm tra, theo dõi diễn biến.",
    SeverityLevel.SERIOUS: "cần lập kế hoạch xử lý.",
    SeverityLevel.EMERGENCY: "cần xử lý ngay.",
}


def rule_based_conclusion(measured: float, reference: float, load: float = 0.0) -> str:
    level = classify(measured, reference)
    delta = float(measured) - float(reference)
    return f"{level.label}: ΔT={delta:.1f}°C, {_ACTIONS[level]}"


async def _call_ai_explainer(
    base_url: str,
    payload: Dict[str, Any],
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 10.0,
) -> Dict[str, Any]:
    url = base_url.rstrip("/") + "/explain/thermal"
    if client is not None:
        resp = await client.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
        return resp.json()

    async with httpx.AsyncClient(timeout=timeout) as owned:
        resp = await owned.post(url, json=payload)
        resp.raise_for_status()
        return resp.json()


async def suggest_conclusion(
    measured: float,
    reference: float,
    load: float = 0.0,
    *,
    explainer_url: str = "",
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, str]:
    """Devuelve {"conclusion", "source"} con source = "ai" o "rules"."""
    fallback = rule_based_conclusion(measured, reference, load)
    if not explainer_url:
        return {"conclusion": fallback, "source": "rules"}

    level = classify(measured, reference)
    payload = {
        "measured_temp": float(measured),
        "reference_temp": float(reference),
        "delta_t": round(float(measured) - float(reference), 1),
        "current_load": float(load),
        "severity": level.value,
        "severity_label": level.label,
    }
    try:
        body = await _call_ai_explainer(explainer_url, payload, client)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("[ANALYSIS] ai-explainer failed, using rules: %s", e)
        return {"conclusion": fallback, "source": "rules"}

    text = str(body.get("conclusion") or body.get("text") or "").strip() if isinstance(body, dict) else ""
    if not text:
        return {"conclusion": fallback, "source": "rules"}
    return {"conclusion": text, "source": "ai"}
