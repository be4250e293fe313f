import statistics
import threading
import time
from collections import deque
from typing import Dict


class MetricsTracker:
    """Collects rolling statistics for dispatched queries."""

    def __init__(self, window: int = 200):
        self._lock = threading.Lock()
        self._durations = deque(maxlen=window)
        self._completed = 0
        self._failed = 0
        self._retries = 0
        self._removed_connections = 0
        self._start = time.time()

    def record_completion(self, duration_ms: float) -> None:
        with self._lock:
            self._completed += 1
            self._durations.append(duration_ms)

    def record_failure(self) -> None:
        with self._lock:
            self._failed += 1

    def record_retry(self) -> None:
        with self._lock:
            self._retries += 1
            self._removed_connections += 1

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            avg = statistics.fmean(self._durations) if self._durations else 0.0
            uptime = time.time() - self._start
            rate = (self._completed / uptime) if uptime else 0.0
            return {
                "avg_ms": avg,
                "completed": self._completed,
                "failed": self._failed,
                "retries": self._retries,
                "removed_connections": self._removed_connections,
                "uptime": uptime,
                "throughput": rate,
            }
