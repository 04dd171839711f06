"""Temperatura ambiente por coordenadas GPS (OpenWeather, unidades métricas)."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..gateway.errors import GatewayTimeout, LogicalFailure, NetworkUnreachable, ValidationFailure

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


async def fetch_ambient_temperature(
    lat: float,
    lon: float,
    *,
    api_key: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 10.0,
) -> float:
    if not api_key:
        raise ValidationFailure("Chưa cấu hình OPENWEATHER_API_KEY.")

    params = {"lat": lat, "lon": lon, "appid": api_key, "units": "metric"}
    owned = client is None
    http = client or httpx.AsyncClient(timeout=timeout)
    try:
        resp = await http.get(OPENWEATHER_URL, params=params, timeout=timeout)
        body = resp.json()
    except httpx.TimeoutException as e:
        raise GatewayTimeout() from e
    except httpx.RequestError as e:
        logger.error("[WEATHER] request error: %s", e)
        raise NetworkUnreachable("Lỗi kết nối khi lấy dữ liệu thời tiết.") from e
    except ValueError as e:
        raise LogicalFailure("Không thể lấy dữ liệu thời tiết.") from e
    finally:
        if owned:
            await http.aclose()

    main = body.get("main") if isinstance(body, dict) else None
    temp = main.get("temp") if isinstance(main, dict) else None
    if temp is None:
        raise LogicalFailure("Không thể lấy dữ liệu thời tiết.")
    return float(temp)
