"""Tests de conclusión sugerida y temperatura ambiente."""

import json

import httpx
import pytest

from thermal_api.analysis.conclusion import rule_based_conclusion, suggest_conclusion
from thermal_api.analysis.weather import OPENWEATHER_URL, fetch_ambient_temperature
from thermal_api.gateway.errors import GatewayTimeout, LogicalFailure, ValidationFailure


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# CONCLUSIÓN
# =============================================================================

class TestConclusion:

    def test_rules_start_with_severity_label(self):
        assert rule_based_conclusion(45, 38).startswith("Theo dõi")
        assert rule_based_conclusion(70, 38).startswith("Nguy cấp")
        assert "ΔT=32.0°C" in rule_based_conclusion(70, 38)

    @pytest.mark.asyncio
    async def test_unconfigured_uses_rules(self):
        result = await suggest_conclusion(45, 38)
        assert result["source"] == "rules"

    @pytest.mark.asyncio
    async def test_ai_explainer_used_when_available(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"conclusion": "Tiếp xúc kém tại đầu cốt."})

        result = await suggest_conclusion(60, 38, 120, explainer_url="http://ai.test/", client=_client(handler))

        assert result == {"conclusion": "Tiếp xúc kém tại đầu cốt.", "source": "ai"}
        assert seen["path"] == "/explain/thermal"
        assert seen["body"]["severity"] == "Serious"
        assert seen["body"]["delta_t"] == 22.0

    @pytest.mark.asyncio
    async def test_explainer_error_falls_back(self):
        result = await suggest_conclusion(
            60, 38, explainer_url="http://ai.test", client=_client(lambda r: httpx.Response(500))
        )
        assert result["source"] == "rules"
        assert result["conclusion"].startswith("Nghiêm trọng")

    @pytest.mark.asyncio
    async def test_empty_explainer_answer_falls_back(self):
        result = await suggest_conclusion(
            60, 38, explainer_url="http://ai.test", client=_client(lambda r: httpx.Response(200, json={}))
        )
        assert result["source"] == "rules"


# =============================================================================
# TEMPERATURA AMBIENTE
# =============================================================================

class TestAmbientTemperature:

    @pytest.mark.asyncio
    async def test_reads_main_temp(self):
        def handler(request):
            assert str(request.url).startswith(OPENWEATHER_URL)
            assert request.url.params["units"] == "metric"
            return httpx.Response(200, json={"main": {"temp": 31.4}})

        temp = await fetch_ambient_temperature(16.05, 108.2, api_key="k", client=_client(handler))
        assert temp == 31.4

    @pytest.mark.asyncio
    async def test_missing_key_is_validation_failure(self):
        with pytest.raises(ValidationFailure):
            await fetch_ambient_temperature(16.05, 108.2, api_key="")

    @pytest.mark.asyncio
    async def test_missing_temp_is_logical_failure(self):
        client = _client(lambda r: httpx.Response(200, json={"cod": 401, "message": "Invalid API key"}))
        with pytest.raises(LogicalFailure):
            await fetch_ambient_temperature(16.05, 108.2, api_key="k", client=client)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("slow", request=request)

        with pytest.raises(GatewayTimeout):
            await fetch_ambient_temperature(16.05, 108.2, api_key="k", client=_client(handler))
