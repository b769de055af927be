"""Observability: counters and timers for engine operations."""

import time
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger().bind(source="observability")


@dataclass
class TimerStats:
    """Running aggregate for one timed operation."""

    count: int = 0
    total: float = 0.0
    max: float = 0.0

    def add(self, duration: float) -> None:
        self.count += 1
        self.total += duration
        self.max = max(self.max, duration)

    def as_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "total": self.total,
            "avg": self.total / self.count if self.count else 0.0,
            "max": self.max,
        }


class Metrics:
    """In-process collector: session operation timings and view fallbacks."""

    def __init__(self):
        self._counters: Counter[str] = Counter()
        self._timers: dict[str, TimerStats] = {}

    def counter(self, name: str, value: int = 1):
        """Increment a counter by the given value."""
        self._counters[name] += value

    def count(self, name: str) -> int:
        return self._counters[name]

    @contextmanager
    def timer(self, name: str):
        """Time the wrapped block, including blocks that raise."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timers.setdefault(name, TimerStats()).add(time.perf_counter() - start)

    def summary(self) -> dict[str, Any]:
        return {
            "counters": dict(self._counters),
            "timers": {name: stats.as_dict() for name, stats in self._timers.items()},
        }

    def reset(self):
        self._counters.clear()
        self._timers.clear()


# Module-level singleton
metrics = Metrics()


def log_run_summary():
    """Log the current metrics summary via structlog."""
    logger.info("run_summary", **metrics.summary())
