"""
Network tracer: masks each captured entry once per destination.

The log destination and every analytics sink carry their own policy, so
the same entry can be logged with ``private`` masking while analytics
only ever sees the ``sensitive`` form. Both paths go through the single
masking facade.
"""

import time
from typing import TYPE_CHECKING, Iterable, List, Optional, Protocol

import structlog

from .entry import TraceEntry
from .masking import mask
from .metrics import MetricsCollector
from .policy import MaskingPolicy

if TYPE_CHECKING:
    from ..config import Settings

logger = structlog.get_logger(__name__)


class AnalyticsSink(Protocol):
    """Destination for masked entries, such as an analytics client adapter."""

    policy: MaskingPolicy

    def track(self, entry: TraceEntry) -> None:
        ...


class NetworkTracer:
    """
    Logs and tracks trace entries.

    Features:
    - Optional structured log output, masked with ``log_policy``
    - Any number of analytics sinks, each masked with its own policy
    - A failing sink never prevents delivery to the remaining sinks
    """

    def __init__(
        self,
        log_policy: Optional[MaskingPolicy] = None,
        sinks: Iterable[AnalyticsSink] = (),
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.log_policy = log_policy
        self.sinks: List[AnalyticsSink] = list(sinks)
        self.metrics = metrics
        logger.info(
            "Network tracer initialized",
            logging_enabled=log_policy is not None,
            log_level=log_policy.level.value if log_policy else None,
            sinks=len(self.sinks),
        )

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        sinks: Iterable[AnalyticsSink] = (),
        metrics: Optional[MetricsCollector] = None,
    ) -> "NetworkTracer":
        """Build a tracer that logs with the configured masking policy."""
        return cls(log_policy=settings.masking.to_policy(), sinks=sinks, metrics=metrics)

    def trace(self, entry: TraceEntry) -> None:
        """Log ``entry`` and hand it to every sink, masked per destination."""
        if self.log_policy is not None:
            self._log(self._mask(entry, self.log_policy))

        for sink in self.sinks:
            masked = self._mask(entry, sink.policy)
            try:
                sink.track(masked)
            except Exception as e:
                logger.error(
                    "Analytics sink failed",
                    sink=type(sink).__name__,
                    request_id=entry.request_id[:8],
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )

    def _mask(self, entry: TraceEntry, policy: MaskingPolicy) -> TraceEntry:
        started = time.perf_counter()
        masked = mask(entry, policy)
        if self.metrics:
            self.metrics.record_masking(entry.kind.raw_value, policy.level.value)
            self.metrics.record_masking_duration(time.perf_counter() - started)
        return masked

    def _log(self, entry: TraceEntry) -> None:
        """Emit one structured event for an already masked entry."""
        duration_ms = round(entry.duration * 1000, 2) if entry.duration is not None else None
        log = logger.error if entry.log_level == "error" else logger.info
        log(
            f"Network {entry.kind.raw_value}",
            request_id=entry.request_id[:8],
            method=entry.method,
            url=entry.url,
            status_code=entry.status_code,
            error=entry.error,
            duration_ms=duration_ms,
            captured_at=entry.timestamp.isoformat(),
            operation=entry.operation_name,
            headers=dict(entry.headers) if entry.headers is not None else None,
            query=entry.query,
            variables=dict(entry.variables) if entry.variables is not None else None,
            body_bytes=len(entry.body) if entry.body is not None else None,
        )
