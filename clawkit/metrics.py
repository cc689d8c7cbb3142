"""HTTP request metrics in the Prometheus text exposition format."""

from __future__ import annotations

import bisect
import math
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from .errors import AppError

DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


@dataclass
class _Histogram:
    bucket_counts: list[int] = field(default_factory=lambda: [0] * len(DEFAULT_BUCKETS))
    total: float = 0.0
    count: int = 0

    def observe(self, value: float) -> None:
        index = bisect.bisect_left(DEFAULT_BUCKETS, value)
        if index < len(DEFAULT_BUCKETS):
            self.bucket_counts[index] += 1
        self.total += value
        self.count += 1


def _fmt(value: float) -> str:
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _labels(pairs: list[tuple[str, str]]) -> str:
    return "{" + ",".join(f'{name}="{_escape(value)}"' for name, value in pairs) + "}"


class AppMetrics:
    """Request counter, duration histogram and in-flight gauge."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.requests_total: dict[tuple[str, str, str], float] = {}
        self.request_durations: dict[tuple[str, str], _Histogram] = {}
        self.in_flight: dict[str, float] = {}

    def observe(self, method: str, path: str, status: int, duration_secs: float) -> None:
        with self._lock:
            key = (method, path, str(status))
            self.requests_total[key] = self.requests_total.get(key, 0.0) + 1
            self.request_durations.setdefault((method, path), _Histogram()).observe(duration_secs)

    def inc_in_flight(self, method: str) -> None:
        with self._lock:
            self.in_flight[method] = self.in_flight.get(method, 0.0) + 1

    def dec_in_flight(self, method: str) -> None:
        with self._lock:
            self.in_flight[method] = self.in_flight.get(method, 0.0) - 1

    def render(self) -> str:
        """Encode all metrics in the Prometheus text format."""
        with self._lock:
            lines: list[str] = []
            if self.requests_total:
                lines += [
                    "# HELP http_requests_total Total HTTP requests",
                    "# TYPE http_requests_total counter",
                ]
                for (method, path, status), value in sorted(self.requests_total.items()):
                    labels = _labels([("method", method), ("path", path), ("status", status)])
                    lines.append(f"http_requests_total{labels} {_fmt(value)}")
            if self.request_durations:
                name = "http_request_duration_seconds"
                lines += [
                    f"# HELP {name} HTTP request duration in seconds",
                    f"# TYPE {name} histogram",
                ]
                for (method, path), hist in sorted(self.request_durations.items()):
                    base = [("method", method), ("path", path)]
                    cumulative = 0
                    for bound, count in zip(DEFAULT_BUCKETS, hist.bucket_counts):
                        cumulative += count
                        lines.append(
                            f"{name}_bucket{_labels(base + [('le', _fmt(bound))])} {cumulative}"
                        )
                    lines.append(f"{name}_bucket{_labels(base + [('le', '+Inf')])} {hist.count}")
                    lines.append(f"{name}_sum{_labels(base)} {_fmt(hist.total)}")
                    lines.append(f"{name}_count{_labels(base)} {hist.count}")
            if self.in_flight:
                lines += [
                    "# HELP http_requests_in_flight In-flight HTTP requests",
                    "# TYPE http_requests_in_flight gauge",
                ]
                for method, value in sorted(self.in_flight.items()):
                    lines.append(f"http_requests_in_flight{_labels([('method', method)])} {_fmt(value)}")
            return "".join(line + "\n" for line in lines)


_METRICS: AppMetrics | None = None
_INIT_LOCK = threading.Lock()


def init_metrics() -> AppMetrics:
    """Create the process-wide metrics instance once and return it."""
    global _METRICS
    with _INIT_LOCK:
        if _METRICS is None:
            _METRICS = AppMetrics()
        return _METRICS


def global_metrics() -> AppMetrics:
    """Return the process-wide metrics; init_metrics() must have run."""
    if _METRICS is None:
        raise RuntimeError("metrics not initialized; call init_metrics() first")
    return _METRICS


def metrics_handler() -> tuple[int, str]:
    """Serve GET /metrics: status code and Prometheus text."""
    try:
        return 200, global_metrics().render()
    except Exception as exc:  # noqa: BLE001 - reported to the scraper
        return 500, f"encode error: {exc}"


async def instrument(
    method: str,
    path: str,
    handler: Callable[[], Awaitable[tuple[int, Any]]],
) -> tuple[int, Any]:
    """Run ``handler`` while recording in-flight count, status and duration."""
    metrics = global_metrics()
    start = time.perf_counter()
    metrics.inc_in_flight(method)
    try:
        response = await handler()
    except AppError as exc:
        metrics.dec_in_flight(method)
        metrics.observe(method, path, exc.status, time.perf_counter() - start)
        raise
    except BaseException:
        metrics.dec_in_flight(method)
        raise
    metrics.dec_in_flight(method)
    metrics.observe(method, path, response[0], time.perf_counter() - start)
    return response