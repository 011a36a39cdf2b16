"""
In-process request telemetry.

Tracks, per operation name:
- ``request_count``: requests received
- ``error_count``: requests that failed or had a side effect fail
- ``execution_duration``: wall-clock time of in-flight requests, measured
  with independent samples so overlapping requests do not interfere
"""

import threading
import time
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)

REQUEST_COUNT = "request_count"
ERROR_COUNT = "error_count"
EXECUTION_DURATION = "execution_duration"


class DurationSample:
    """A single in-flight measurement started by ``MetricsRecorder``."""

    def __init__(self, recorder: "MetricsRecorder", operation: str):
        self._recorder = recorder
        self.operation = operation
        self._started = time.perf_counter()
        self._elapsed: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._elapsed is None

    def stop(self) -> float:
        """
        Stop the sample and report it to the recorder.

        Calling ``stop`` more than once returns the first measurement and
        records nothing further.

        Returns:
            Elapsed seconds
        """
        if self._elapsed is None:
            self._elapsed = time.perf_counter() - self._started
            self._recorder._finish_sample(self.operation, self._elapsed)
        return self._elapsed

    def __enter__(self) -> "DurationSample":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


class _TimerStats:
    def __init__(self):
        self.count = 0
        self.total_seconds = 0.0
        self.max_seconds = 0.0
        self.active = 0


class MetricsRecorder:
    """
    Monotonic counters and duration timers keyed by operation name.

    Created once at startup and handed to every component that reports
    telemetry. All methods are safe to call from concurrent requests.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: Dict[str, Dict[str, int]] = {
            REQUEST_COUNT: {},
            ERROR_COUNT: {},
        }
        self._timers: Dict[str, _TimerStats] = {}

    def record_request(self, operation: str) -> None:
        self._increment(REQUEST_COUNT, operation)

    def record_error(self, operation: str) -> None:
        self._increment(ERROR_COUNT, operation)

    def start_duration_sample(self, operation: str) -> DurationSample:
        """
        Start measuring one in-flight request.

        Args:
            operation: Operation name the sample is tagged with

        Returns:
            Handle whose ``stop()`` ends the measurement
        """
        with self._lock:
            self._timers.setdefault(operation, _TimerStats()).active += 1
        return DurationSample(self, operation)

    def request_count(self, operation: str) -> int:
        with self._lock:
            return self._counters[REQUEST_COUNT].get(operation, 0)

    def error_count(self, operation: str) -> int:
        with self._lock:
            return self._counters[ERROR_COUNT].get(operation, 0)

    def active_samples(self, operation: str) -> int:
        with self._lock:
            stats = self._timers.get(operation)
            return stats.active if stats else 0

    def completed_samples(self, operation: str) -> int:
        with self._lock:
            stats = self._timers.get(operation)
            return stats.count if stats else 0

    def snapshot(self) -> Dict[str, Any]:
        """Return all metrics as a JSON-serializable dictionary."""
        with self._lock:
            return {
                REQUEST_COUNT: dict(self._counters[REQUEST_COUNT]),
                ERROR_COUNT: dict(self._counters[ERROR_COUNT]),
                EXECUTION_DURATION: {
                    operation: {
                        "count": stats.count,
                        "total_seconds": round(stats.total_seconds, 6),
                        "max_seconds": round(stats.max_seconds, 6),
                        "active": stats.active,
                    }
                    for operation, stats in self._timers.items()
                },
            }

    def _increment(self, metric: str, operation: str) -> None:
        with self._lock:
            counter = self._counters[metric]
            counter[operation] = counter.get(operation, 0) + 1

    def _finish_sample(self, operation: str, elapsed: float) -> None:
        with self._lock:
            stats = self._timers.setdefault(operation, _TimerStats())
            stats.active = max(stats.active - 1, 0)
            stats.count += 1
            stats.total_seconds += elapsed
            stats.max_seconds = max(stats.max_seconds, elapsed)
        logger.debug(
            "Duration sample recorded",
            operation=operation,
            duration_seconds=round(elapsed, 6)
        )
