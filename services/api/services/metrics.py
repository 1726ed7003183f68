"""
Prometheus metrics collector.

Each collector owns a private CollectorRegistry, so separate app instances
(and tests) never share counters. prometheus_client metrics are internally
locked and safe under concurrent increments.
"""

import logging
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

logger = logging.getLogger("api.metrics")

UNMATCHED_ROUTE = "#unmatched"

_LABELS = ("method", "route", "status_code")


class MetricsCollector:
    def __init__(self, registry: Optional[CollectorRegistry] = None, default_metrics: bool = True):
        self.registry = registry or CollectorRegistry()
        if default_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        self.requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            _LABELS,
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request latency in seconds",
            _LABELS,
            registry=self.registry,
        )
        logger.debug("Metrics registry initialized", extra={"default_metrics": default_metrics})

    def observe(self, method: str, route: Optional[str], status_code: int, elapsed: float) -> None:
        """Record one finished request under its route template."""
        labels = (method.upper(), route or UNMATCHED_ROUTE, str(status_code))
        self.requests_total.labels(*labels).inc()
        self.request_duration.labels(*labels).observe(max(elapsed, 0.0))

    def request_count(self, method: str, route: Optional[str], status_code: int) -> float:
        value = self.registry.get_sample_value(
            "http_requests_total",
            {
                "method": method.upper(),
                "route": route or UNMATCHED_ROUTE,
                "status_code": str(status_code),
            },
        )
        return value or 0.0

    def snapshot(self) -> bytes:
        """Exposition text with # HELP / # TYPE headers per family."""
        return generate_latest(self.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST
