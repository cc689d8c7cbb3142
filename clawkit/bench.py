"""Local micro-benchmarks and the formatting of their statistics."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from .tools import build_default_registry


def fmt_duration(seconds: float) -> str:
    """Format a duration in seconds as s, ms or µs depending on its size."""
    if seconds >= 1.0:
        return f"{seconds:.3f}s"
    if seconds >= 0.001:
        return f"{seconds * 1_000.0:.3f}ms"
    return f"{seconds * 1_000_000.0:.1f}µs"


@dataclass(frozen=True)
class BenchStats:
    """Summary of a series of timed samples, all in seconds."""

    iters: int
    total: float
    minimum: float
    average: float
    maximum: float
    per_sec: float

    @classmethod
    def from_samples(cls, samples: Sequence[float], iters: int) -> BenchStats:
        """Summarise ``samples``; an empty series gives all zeros."""
        total = float(sum(samples))
        minimum = min(samples, default=0.0)
        maximum = max(samples, default=0.0)
        average = total / (len(samples) or 1)
        per_sec = 0.0 if total == 0 else iters / total
        return cls(
            iters=iters,
            total=total,
            minimum=float(minimum),
            average=average,
            maximum=float(maximum),
            per_sec=per_sec,
        )

    def lines(self, label: str) -> list[str]:
        """Report lines: a header naming ``label`` followed by the figures."""
        return [
            f"── bench {label} ──",
            f"  iters    : {self.iters}",
            f"  total    : {fmt_duration(self.total)}",
            f"  min      : {fmt_duration(self.minimum)}",
            f"  avg      : {fmt_duration(self.average)}",
            f"  max      : {fmt_duration(self.maximum)}",
            f"  ops/sec  : {self.per_sec:.1f}",
        ]


async def bench_tool(iters: int) -> BenchStats:
    """Time ``iters`` invocations of the echo tool after a short warm-up."""
    if iters < 0:
        raise ValueError("iters must not be negative")
    echo = build_default_registry().get("echo")
    if echo is None:
        raise LookupError("echo tool not registered")
    args = {"text": "bench"}
    for _ in range(min(10, iters)):
        await echo.invoke(dict(args))

    samples: list[float] = []
    for _ in range(iters):
        start = time.perf_counter()
        await echo.invoke(dict(args))
        samples.append(time.perf_counter() - start)
    return BenchStats.from_samples(samples, iters)