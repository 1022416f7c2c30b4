"""Timing instrumentation for pipeline stages."""

from aoi_mapper.monitoring.performance import PerformanceMonitor, TimingStats

__all__ = ["PerformanceMonitor", "TimingStats"]
