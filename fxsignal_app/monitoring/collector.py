"""
Explicitly constructed metrics collector.

Callers create a collector and pass it to the components they want
instrumented; nothing here is module-level state.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass
class TimerStats:
    """Accumulated timings for one operation."""
    count: int = 0
    total_seconds: float = 0.0
    max_seconds: float = 0.0

    def record(self, duration: float) -> None:
        self.count += 1
        self.total_seconds += duration
        self.max_seconds = max(self.max_seconds, duration)

    @property
    def avg_ms(self) -> float:
        return self.total_seconds / max(self.count, 1) * 1000


class MetricsCollector:
    """Counters and timers for analysis operations."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.timers: dict[str, TimerStats] = {}

    def increment(self, name: str, amount: int = 1) -> None:
        """Increase a named counter."""
        self.counters[name] = self.counters.get(name, 0) + amount

    def record(self, name: str, duration: float) -> None:
        """Record one duration in seconds for a named operation."""
        self.timers.setdefault(name, TimerStats()).record(duration)

    @contextmanager
    def time(self, name: str) -> Iterator[None]:
        """Time the enclosed block, recording even when it raises."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, time.perf_counter() - start)

    def snapshot(self) -> dict[str, Any]:
        """Get current counters and timer summaries."""
        return {
            "counters": dict(self.counters),
            "timers": {
                name: {
                    "count": stats.count,
                    "avg_ms": stats.avg_ms,
                    "max_ms": stats.max_seconds * 1000,
                }
                for name, stats in self.timers.items()
            },
        }

    def reset(self) -> None:
        self.counters.clear()
        self.timers.clear()
