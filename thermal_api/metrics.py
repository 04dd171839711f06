"""Métricas Prometheus del servicio."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


GATEWAY_CALLS = Counter(
    "thermal_gateway_calls_total",
    "Total calls to the remote scripting endpoint",
    ["action", "outcome"],  # ok, timeout, network, malformed, logical
)

GATEWAY_LATENCY = Histogram(
    "thermal_gateway_latency_seconds",
    "Latency of calls to the remote scripting endpoint",
    ["action"],
)

IMAGE_CHAIN_OUTCOMES = Counter(
    "thermal_image_chain_outcomes_total",
    "Terminal outcomes of the image resolution chain",
    ["mode"],  # modo que resolvió, o "unavailable"
)

STALE_RESPONSES = Counter(
    "thermal_stale_responses_discarded_total",
    "Fetch responses discarded because a newer fetch was issued",
    ["view"],
)
