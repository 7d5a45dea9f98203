"""Prometheus registry and the HTTP middleware that feeds it."""

from __future__ import annotations

import os
import time
from typing import Any, Awaitable, Callable, Dict

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from roundcaddy import __version__

REGISTRY = CollectorRegistry()

API_REQUESTS = Counter(
    "api_requests_total",
    "API requests by route template and status",
    ["route", "method", "status"],
    registry=REGISTRY,
)
API_LATENCY = Histogram(
    "api_request_latency_seconds",
    "API request latency (seconds)",
    ["route", "method"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=REGISTRY,
)
BUILD_INFO = Gauge(
    "roundcaddy_build_info",
    "Build metadata; the value is always 1",
    ["version", "git"],
    registry=REGISTRY,
)

BUILD_VERSION = os.getenv("BUILD_VERSION", __version__)
GIT_SHA = os.getenv("GIT_SHA", "unknown")
BUILD_INFO.labels(version=BUILD_VERSION, git=GIT_SHA).set(1)

# Scrapes of the exposition endpoint itself are not recorded.
UNTRACKED_PATHS = frozenset({"/metrics"})


async def metrics_app(_req: Request | None = None) -> Response:
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def _route_label(scope: Dict[str, Any]) -> str:
    # Path params would explode cardinality, so prefer the matched template.
    route = scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return template
    return "unmatched" if scope.get("path") else ""


class MetricsMiddleware:
    def __init__(self, app: Callable[..., Awaitable[Any]]):
        self.app = app

    async def __call__(
        self,
        scope: Dict[str, Any],
        receive: Callable[..., Awaitable[Any]],
        send: Callable[..., Awaitable[Any]],
    ) -> None:
        if scope.get("type") != "http" or scope.get("path") in UNTRACKED_PATHS:
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def _record_status(message: Dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = message.get("status", 200)
            await send(message)

        try:
            await self.app(scope, receive, _record_status)
        finally:
            method = scope.get("method", "GET")
            route = _route_label(scope)
            API_LATENCY.labels(route=route, method=method).observe(
                time.perf_counter() - start
            )
            API_REQUESTS.labels(
                route=route, method=method, status=str(status_code)
            ).inc()


__all__ = [
    "API_LATENCY",
    "API_REQUESTS",
    "BUILD_INFO",
    "BUILD_VERSION",
    "GIT_SHA",
    "REGISTRY",
    "MetricsMiddleware",
    "metrics_app",
]
