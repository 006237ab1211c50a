"""
Performance monitor - bounded rolling history of timed operations.

The monitor is a plain value owned by the host; every engine call that does
real work records one sample. Once ``capacity`` samples are held the oldest
is dropped.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, TypeVar

from .faults import ConfigFault

T = TypeVar("T")

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class PerformanceSample:
    """One timed operation (or a batch of ``sample_size`` iterations)."""
    operation_name: str
    execution_time_ms: float
    timestamp: float
    sample_size: int = 1

    @property
    def operations_per_second(self) -> float:
        if self.execution_time_ms <= 0:
            return 0.0
        return self.sample_size / (self.execution_time_ms / 1000.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation_name": self.operation_name,
            "execution_time_ms": self.execution_time_ms,
            "timestamp": self.timestamp,
            "sample_size": self.sample_size,
            "operations_per_second": self.operations_per_second,
        }


@dataclass
class PerformanceSnapshot:
    samples: List[PerformanceSample] = field(default_factory=list)
    average_execution_time_ms: float = 0.0
    total_operations: int = 0
    start_time: float = 0.0
    end_time: float = 0.0


@dataclass
class PerformanceComparison:
    """Average timing of two operations; positive improvement means the second is faster."""
    operation1: str
    operation1_average_ms: float
    operation1_samples: int
    operation2: str
    operation2_average_ms: float
    operation2_samples: int
    improvement_ms: float
    improvement_percentage: float


@dataclass
class CombinedMetrics:
    cache_efficiency: float
    average_execution_time_ms: float
    estimated_time_saved_ms: float
    total_operations: int


def _average(samples: List[PerformanceSample]) -> float:
    if not samples:
        return 0.0
    return sum(s.execution_time_ms for s in samples) / len(samples)


class PerformanceMonitor:
    """
    Thread-safe rolling history of ``PerformanceSample`` records.

    Usage::

        monitor = PerformanceMonitor(capacity=50)
        with monitor.timed("extract"):
            ...
        monitor.get_history()      # copy, oldest first
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigFault("monitor_capacity", f"must be a positive integer, got {capacity!r}")
        self.capacity = capacity
        self._history: deque = deque(maxlen=capacity)
        self._lock = threading.RLock()

    def record(self, operation_name: str, duration_ms: float, sample_size: int = 1) -> PerformanceSample:
        """Append a timestamped sample, dropping the oldest at capacity."""
        sample = PerformanceSample(
            operation_name=operation_name,
            execution_time_ms=float(duration_ms),
            timestamp=time.time(),
            sample_size=sample_size,
        )
        with self._lock:
            self._history.append(sample)
        return sample

    def get_history(self) -> List[PerformanceSample]:
        """Snapshot of the history, oldest first."""
        with self._lock:
            return list(self._history)

    def get_operation_history(self, operation_name: str) -> List[PerformanceSample]:
        with self._lock:
            return [s for s in self._history if s.operation_name == operation_name]

    def get_recent(self, count: int = DEFAULT_CAPACITY) -> List[PerformanceSample]:
        """The ``count`` most recent samples, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            return list(self._history)[-count:]

    def clear(self):
        with self._lock:
            self._history.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    # ── Timing helpers ───────────────────────────────────────────────

    @contextmanager
    def timed(self, operation_name: str) -> Iterator[None]:
        """Record the wall-clock duration of the ``with`` body."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(operation_name, (time.perf_counter() - start) * 1000.0)

    def benchmark(
        self,
        operation_name: str,
        func: Callable[[], T],
        iterations: int = 100,
    ) -> Tuple[T, PerformanceSample]:
        """Run ``func`` ``iterations`` times and record one aggregate sample."""
        if iterations < 1:
            raise ValueError("iterations must be at least 1")

        result: Any = None
        start = time.perf_counter()
        for _ in range(iterations):
            result = func()
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        return result, self.record(operation_name, elapsed_ms, sample_size=iterations)

    # ── Analytics ────────────────────────────────────────────────────

    def compare(self, operation1: str, operation2: str) -> PerformanceComparison:
        first = self.get_operation_history(operation1)
        second = self.get_operation_history(operation2)
        avg1 = _average(first)
        avg2 = _average(second)
        diff = avg1 - avg2
        return PerformanceComparison(
            operation1=operation1,
            operation1_average_ms=avg1,
            operation1_samples=len(first),
            operation2=operation2,
            operation2_average_ms=avg2,
            operation2_samples=len(second),
            improvement_ms=diff,
            improvement_percentage=(diff / avg1) * 100 if avg1 > 0 else 0.0,
        )

    def snapshot(self, samples: Optional[List[PerformanceSample]] = None) -> PerformanceSnapshot:
        samples = self.get_history() if samples is None else list(samples)
        if not samples:
            return PerformanceSnapshot()
        timestamps = [s.timestamp for s in samples]
        return PerformanceSnapshot(
            samples=samples,
            average_execution_time_ms=_average(samples),
            total_operations=sum(s.sample_size for s in samples),
            start_time=min(timestamps),
            end_time=max(timestamps),
        )

    def combined_metrics(
        self,
        cache_metrics: Mapping[str, int],
        samples: Optional[List[PerformanceSample]] = None,
    ) -> CombinedMetrics:
        """Blend cache counters with timing: efficiency % and estimated time saved."""
        samples = self.get_history() if samples is None else list(samples)
        hits = cache_metrics.get("hits", 0)
        accesses = hits + cache_metrics.get("misses", 0)
        average = _average(samples)
        return CombinedMetrics(
            cache_efficiency=(hits / accesses) * 100 if accesses else 0.0,
            average_execution_time_ms=average,
            estimated_time_saved_ms=hits * average,
            total_operations=sum(s.sample_size for s in samples),
        )
