"""Prometheus registry and HTTP middleware shared by the holeplan API."""

from __future__ import annotations

import os
import time
from typing import Any, Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()
REQUESTS = Counter(
    "holeplan_requests_total",
    "HTTP requests served by the planner API",
    ["route", "method", "status"],
    registry=REGISTRY,
)
LATENCY = Histogram(
    "holeplan_request_latency_seconds",
    "Planner API request latency (seconds)",
    ["route", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
    registry=REGISTRY,
)

BUILD_VERSION = os.getenv("BUILD_VERSION", "dev")
GIT_SHA = os.getenv("GIT_SHA", "unknown")

UNMATCHED_ROUTE = "unmatched"
_SKIP_PATHS = frozenset({"/metrics"})


async def metrics_app(_req: Request | None = None) -> Response:
    data = generate_latest(REGISTRY)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


def _route_label(scope: dict[str, Any]) -> str:
    # Label by route template so path parameters cannot blow up cardinality.
    route = scope.get("route")
    template = getattr(route, "path", None)
    return template or UNMATCHED_ROUTE


class MetricsMiddleware:
    """ASGI middleware recording request count and latency per route."""

    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http" or scope.get("path") in _SKIP_PATHS:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        start = time.perf_counter()
        status_code = 500

        async def _send(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            route = _route_label(scope)
            LATENCY.labels(route=route, method=method).observe(
                time.perf_counter() - start
            )
            REQUESTS.labels(route=route, method=method, status=str(status_code)).inc()


__all__ = [
    "BUILD_VERSION",
    "GIT_SHA",
    "LATENCY",
    "MetricsMiddleware",
    "REGISTRY",
    "REQUESTS",
    "metrics_app",
]
