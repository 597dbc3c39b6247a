"""Logging and Prometheus metrics."""

from __future__ import annotations

from casino.observability.logging import configure_logging
from casino.observability.metrics import MetricsMiddleware, metrics_response

__all__ = [
    "MetricsMiddleware",
    "configure_logging",
    "metrics_response",
]
