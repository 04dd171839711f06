from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[1]
    return str(repo_root / ".env")


def _json_env(name: str) -> dict:
    raw = os.getenv(name, "").strip()
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("[CONFIG] %s is not valid JSON, ignoring", name)
        return {}
    if not isinstance(value, dict):
        logger.warning("[CONFIG] %s must be a JSON object, ignoring", name)
        return {}
    return value


@dataclass(frozen=True)
class Settings:
    gateway_url: str
    fetch_timeout_seconds: float
    image_attempt_timeout_seconds: float

    feeder_cache_url: str
    feeder_sheet_name: str

    unit_passwords: Dict[str, str] = field(default_factory=dict)
    unit_feeders: Dict[str, List[str]] = field(default_factory=dict)

    ai_explainer_url: str = ""
    openweather_api_key: str = ""
    log_level: str = "INFO"


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("THERMAL_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    gateway_url = os.getenv("GATEWAY_URL", "").strip()
    fetch_timeout = float(os.getenv("GATEWAY_FETCH_TIMEOUT_SECONDS", "15"))
    image_timeout = float(os.getenv("IMAGE_ATTEMPT_TIMEOUT_SECONDS", "5"))

    feeder_cache_url = os.getenv("FEEDER_CACHE_URL", "sqlite:///./feeder_cache.db")
    feeder_sheet_name = os.getenv("FEEDER_SHEET_NAME", "xuattuyen")

    unit_feeders = {
        str(unit): [str(f) for f in feeders]
        for unit, feeders in _json_env("UNIT_FEEDERS").items()
        if isinstance(feeders, list)
    }

    return Settings(
        gateway_url=gateway_url,
        fetch_timeout_seconds=fetch_timeout,
        image_attempt_timeout_seconds=image_timeout,
        feeder_cache_url=feeder_cache_url,
        feeder_sheet_name=feeder_sheet_name,
        unit_passwords={str(k): str(v) for k, v in _json_env("UNIT_PASSWORDS").items()},
        unit_feeders=unit_feeders,
        ai_explainer_url=os.getenv("AI_EXPLAINER_URL", "").strip(),
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", "").strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def cached_settings() -> Settings:
    return get_settings()
