"""Prometheus metrics: per-route request counts and latency, plus post engagement.

Engagement increments are counted per counter, and background view increments
that fail are counted rather than surfaced to readers.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_COUNTER = Counter(
    "casino_request_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "casino_request_duration_seconds",
    "HTTP request latency",
    ["method", "path"],
)
ENGAGEMENT_INCREMENTS = Counter(
    "casino_post_engagement_total",
    "Engagement counter increments applied to blog posts",
    ["counter"],
)
VIEW_INCREMENT_FAILURES = Counter(
    "casino_post_view_increment_failures_total",
    "Background view increments that failed and were dropped",
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        # Label by route template so /api/posts/{slug} stays one series
        route = request.scope.get("route")
        path_template = getattr(route, "path", "unmatched")
        REQUEST_COUNTER.labels(
            request.method, path_template, response.status_code
        ).inc()
        REQUEST_LATENCY.labels(request.method, path_template).observe(duration)
        return response


def metrics_response() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
