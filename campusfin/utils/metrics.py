"""
Metrics Collection.

Counters and timers for recurrence generation, rollover and rate limiting.
"""

import time
from typing import Dict, Any, Callable
from collections import defaultdict
from datetime import datetime
from functools import wraps
import threading


class MetricsCollector:
    """Collects and manages in-process metrics for the API."""

    def __init__(self):
        """Initialize metrics collector."""
        self.metrics = defaultdict(int)
        self.timers = defaultdict(float)
        self.lock = threading.Lock()

        self.metrics["recurring_instances_created_total"] = 0
        self.metrics["rollover_runs_total"] = 0
        self.metrics["rollover_transfers_total"] = 0
        self.metrics["rate_limit_rejections_total"] = 0
        self.metrics["errors_total"] = 0

    def increment_counter(self, metric_name: str, value: int = 1):
        """Increment a counter metric."""
        with self.lock:
            self.metrics[metric_name] += value

    def record_timer(self, metric_name: str, duration: float):
        """Record a timing metric."""
        with self.lock:
            self.timers[metric_name] += duration

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics values."""
        with self.lock:
            return {
                "counters": dict(self.metrics),
                "timers": dict(self.timers),
                "timestamp": datetime.utcnow().isoformat()
            }

    def recurring_instances_created(self, count: int):
        self.increment_counter("recurring_instances_created_total", count)

    def rollover_run(self):
        self.increment_counter("rollover_runs_total")

    def rollover_transfer(self):
        self.increment_counter("rollover_transfers_total")

    def rate_limit_rejected(self):
        self.increment_counter("rate_limit_rejections_total")

    def error(self):
        self.increment_counter("errors_total")

    def time_operation(self, metric_name: str) -> Callable:
        """Decorator recording the wall time of each call under metric_name."""
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    self.record_timer(metric_name, time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics_collector = MetricsCollector()
