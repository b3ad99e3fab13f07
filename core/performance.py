import time
from contextlib import contextmanager
from typing import Dict, Optional
from datetime import datetime, timezone
from collections import defaultdict
from core.logger import get_logger

logger = get_logger(__name__)


class PerformanceMonitor:
    """Track and report performance metrics"""

    def __init__(self):
        self.metrics: Dict[str, list] = defaultdict(list)

    @contextmanager
    def measure(self, operation_name: str, context: Optional[Dict] = None):
        """
        Context manager to measure operation duration.

        Usage:
            with monitor.measure("sourcemap_sync", {"links": 120}):
                await service.process_all(urls)
        """
        start_time = time.perf_counter()
        error = None

        try:
            yield
        except Exception as e:
            error = e
            raise
        finally:
            duration = time.perf_counter() - start_time

            self.metrics[operation_name].append({
                "duration": duration,
                "timestamp": datetime.now(timezone.utc),
                "context": context or {},
                "success": error is None
            })

            if error:
                logger.error(
                    f"{operation_name} failed",
                    duration=duration,
                    context=context or {},
                    exc_info=True
                )
            else:
                logger.debug(
                    f"{operation_name} completed",
                    duration=duration,
                    context=context or {}
                )

    def last_duration(self, operation_name: str) -> float:
        """Duration in seconds of the most recent measurement, 0.0 if none."""
        runs = self.metrics.get(operation_name)
        if not runs:
            return 0.0
        return runs[-1]["duration"]


# Global instance
_performance_monitor = None

def get_performance_monitor() -> PerformanceMonitor:
    """Get singleton performance monitor instance"""
    global _performance_monitor
    if _performance_monitor is None:
        _performance_monitor = PerformanceMonitor()
    return _performance_monitor
