"""Metrics collection for analysis operations."""

from .collector import MetricsCollector, TimerStats

__all__ = ["MetricsCollector", "TimerStats"]
