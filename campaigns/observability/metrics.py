from __future__ import annotations

import logging
import secrets
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from statsd import StatsClient

from campaigns.config import settings

logger = logging.getLogger("campaigns.metrics")

COUNTER = "counter"
GAUGE = "gauge"
TIMING = "timing"


class MetricsReporter:
    """Emits profit-sharing counters, gauges and timings to the log or StatsD.

    Every metric is logged at DEBUG under ``campaigns.metric``. When the
    ``statsd`` backend is selected the same value is also sent over UDP; StatsD
    has no tag support, so tags only travel with the log record.
    """

    def __init__(
        self,
        *,
        namespace: str | None = None,
        backend: str | None = None,
        sample_rate: float | None = None,
        disabled: bool | None = None,
    ) -> None:
        self._disabled = settings.metrics_disable if disabled is None else disabled
        self._namespace = namespace or settings.metrics_namespace or "campaigns"
        self._backend = (backend or settings.metrics_backend or "stdout").lower()
        rate = settings.metrics_sample_rate if sample_rate is None else sample_rate
        self._sample_rate = max(0.0, min(rate, 1.0))
        self._base_tags = {"environment": settings.environment}
        self._statsd: StatsClient | None = None
        if self._backend == "statsd" and not self._disabled:
            try:
                self._statsd = StatsClient(
                    host=settings.metrics_statsd_host,
                    port=settings.metrics_statsd_port,
                    prefix="",
                )
            except OSError as exc:  # pragma: no cover - depends on host resolution
                self._log_backend_error("statsd.init", exc)

    def increment(
        self, metric: str, value: float = 1.0, *, tags: dict[str, Any] | None = None
    ) -> None:
        self._emit(COUNTER, metric, value, tags)

    def gauge(self, metric: str, value: float, *, tags: dict[str, Any] | None = None) -> None:
        self._emit(GAUGE, metric, value, tags)

    def timing(self, metric: str, value_ms: float, *, tags: dict[str, Any] | None = None) -> None:
        self._emit(TIMING, metric, value_ms, tags)

    @contextmanager
    def timer(self, metric: str, *, tags: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        """Time the block in milliseconds. Tags added to the yielded dict are reported too."""
        block_tags: dict[str, Any] = dict(tags or {})
        start = time.perf_counter()
        try:
            yield block_tags
        finally:
            self.timing(metric, (time.perf_counter() - start) * 1000, tags=block_tags)

    def _emit(
        self, metric_type: str, metric: str, value: float | None, tags: dict[str, Any] | None
    ) -> None:
        if self._disabled or value is None:
            return
        rate = 1.0 if metric_type == GAUGE else self._sample_rate
        if rate < 1.0 and not self._sampled(rate):
            return

        name = self._normalize_metric(metric)
        record: dict[str, Any] = {
            "metric": name,
            "value": round(float(value), 4),
            "type": metric_type,
            "tags": {**self._base_tags, **(tags or {})},
        }
        if rate < 1.0:
            record["sample_rate"] = round(rate, 4)
        logger.debug("campaigns.metric", extra={"metrics": record})
        if self._statsd is not None:
            self._send_statsd(metric_type, name, value, rate)

    @staticmethod
    def _sampled(rate: float) -> bool:
        return secrets.randbelow(1_000_000) / 1_000_000 < rate

    def _send_statsd(self, metric_type: str, name: str, value: float, rate: float) -> None:
        assert self._statsd is not None
        try:
            if metric_type == TIMING:
                self._statsd.timing(name, value, rate=rate)
            elif metric_type == GAUGE:
                self._statsd.gauge(name, value)
            else:
                self._statsd.incr(name, value, rate=rate)
        except OSError as exc:  # pragma: no cover - network failure
            self._log_backend_error(name, exc)

    def _normalize_metric(self, metric: str) -> str:
        trimmed = (metric or "").strip(". ")
        if not trimmed:
            return self._namespace
        if trimmed.startswith(f"{self._namespace}."):
            return trimmed
        return f"{self._namespace}.{trimmed}"

    def _log_backend_error(self, metric: str, exc: Exception) -> None:
        logger.warning(
            "metrics.backend_error",
            extra={"metric": metric, "backend": self._backend, "error": type(exc).__name__},
        )


metrics = MetricsReporter()
