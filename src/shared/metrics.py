"""Thread-safe run counters and timing."""

import threading
import time
from typing import Dict, Any
from collections import defaultdict


class MetricsCollector:
    """
    Collects counters shared by the worker threads of a run.
    Implements IMetricsCollector protocol.

    All mutations and reads go through one lock, so concurrent workers never
    lose an increment.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._start_time = time.time()
        self._timers: Dict[str, float] = {}
        self._counters: Dict[str, int] = defaultdict(int)

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        with self._lock:
            self._timers[name] = time.time()

    def stop_timer(self, name: str) -> float:
        """
        Stop a named timer and return elapsed time.

        Raises:
            KeyError: If timer was not started
        """
        with self._lock:
            if name not in self._timers:
                raise KeyError(f"Timer '{name}' was not started")
            return time.time() - self._timers.pop(name)

    def increment_counter(self, name: str, amount: int = 1) -> int:
        """Increment a counter and return the new value."""
        with self._lock:
            self._counters[name] += amount
            return self._counters[name]

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        with self._lock:
            return self._counters.get(name, 0)

    def elapsed_time(self) -> float:
        """Get total elapsed time since initialization."""
        return time.time() - self._start_time

    def get_summary(self) -> Dict[str, Any]:
        """Snapshot of all counters."""
        with self._lock:
            counters = dict(self._counters)

        return {
            "total_elapsed": self.elapsed_time(),
            "counters": counters,
        }
