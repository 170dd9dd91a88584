"""
Prometheus metrics collection.

Each collector owns its registry so several apps (and test clients) can
coexist in one process.
"""

from typing import Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Histogram, Info

from .. import __version__

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """
    Centralized metrics collection for tracemask.

    Keep metrics simple: in-memory counters, let Prometheus handle storage.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        # Service info
        self.service_info = Info(
            "tracemask_service",
            "tracemask service information",
            registry=self.registry,
        )
        self.service_info.info({
            "version": __version__,
            "service": "tracemask",
        })

        # Request metrics
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry,
        )

        # Masking metrics
        self.entries_masked_total = Counter(
            "tracemask_entries_masked_total",
            "Total trace entries masked",
            ["kind", "level"],
            registry=self.registry,
        )

        self.masking_duration = Histogram(
            "tracemask_masking_duration_seconds",
            "Time spent masking a batch of entries",
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=self.registry,
        )

        logger.debug("Metrics collector initialized")

    def record_request(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        duration_seconds: float
    ) -> None:
        """Record HTTP request metrics."""
        self.requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self.request_duration.labels(
            method=method,
            endpoint=endpoint
        ).observe(duration_seconds)

    def record_masking(self, kind: str, level: str, entries_count: int = 1) -> None:
        """Record masked entries."""
        self.entries_masked_total.labels(kind=kind, level=level).inc(entries_count)

    def record_masking_duration(self, duration_seconds: float) -> None:
        self.masking_duration.observe(duration_seconds)
