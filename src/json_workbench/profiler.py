"""Timing and memory accounting for sandboxed transform runs."""

import time
import psutil
import logging
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, field
from contextlib import contextmanager


@dataclass
class ExecutionMetrics:
    """What one profiled run cost."""
    operation_name: str
    duration: float
    input_size: int
    output_size: int
    memory_start_mb: float
    memory_end_mb: float
    memory_peak_mb: float
    succeeded: bool


@dataclass
class ActiveRun:
    """
    Handle yielded while a run is being profiled.

    The profiled block fills in ``output_size`` and ``succeeded`` and may call
    ``sample`` to record intermediate memory use.
    """
    operation_name: str
    input_size: int
    started: float
    memory_start_mb: float
    memory_peak_mb: float
    output_size: int = 0
    succeeded: bool = True
    _sampler: Any = field(default=None, repr=False)

    def sample(self) -> None:
        self.memory_peak_mb = max(self.memory_peak_mb, self._sampler(self.memory_peak_mb))


class ExecutionProfiler:
    """
    Records duration and resident memory of transform runs.

    Finished runs accumulate in ``metrics_history`` for the lifetime of the
    profiler. Memory figures come from psutil; when the process cannot be
    inspected the last known value is reused.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[ExecutionMetrics] = []
        self.active: Optional[ActiveRun] = None

    @contextmanager
    def profile_operation(self, operation_name: str, input_size: int = 0):
        """
        Profile the enclosed block as one run.

        The metrics are recorded even if the block raises.

        Args:
            operation_name: Label stored with the metrics
            input_size: Input size in bytes

        Yields:
            ActiveRun for the block to update
        """
        if self.active is not None:
            raise ValueError(f"Already profiling {self.active.operation_name}")

        rss = self._current_memory_mb(0.0)
        self.active = ActiveRun(
            operation_name=operation_name,
            input_size=input_size,
            started=time.perf_counter(),
            memory_start_mb=rss,
            memory_peak_mb=rss,
            _sampler=self._current_memory_mb
        )
        try:
            yield self.active
        finally:
            self._finish()

    def _finish(self) -> ExecutionMetrics:
        run = self.active
        self.active = None

        memory_end = self._current_memory_mb(run.memory_peak_mb)
        metrics = ExecutionMetrics(
            operation_name=run.operation_name,
            duration=time.perf_counter() - run.started,
            input_size=run.input_size,
            output_size=run.output_size,
            memory_start_mb=run.memory_start_mb,
            memory_end_mb=memory_end,
            memory_peak_mb=max(run.memory_peak_mb, memory_end),
            succeeded=run.succeeded
        )
        self.metrics_history.append(metrics)

        self.logger.debug(f"{metrics.operation_name}: {metrics.duration * 1000:.1f}ms, "
                          f"{metrics.input_size} -> {metrics.output_size} bytes, "
                          f"peak {metrics.memory_peak_mb:.1f} MB, "
                          f"{'ok' if metrics.succeeded else 'failed'}")
        return metrics

    def get_performance_summary(self) -> Dict[str, Any]:
        """Aggregate figures over every recorded run."""
        runs = self.metrics_history
        if not runs:
            return {"total_operations": 0}

        durations = [m.duration for m in runs]
        return {
            "total_operations": len(runs),
            "failed_operations": len([m for m in runs if not m.succeeded]),
            "total_duration": sum(durations),
            "average_duration": sum(durations) / len(runs),
            "max_duration": max(durations),
            "average_memory_peak_mb": sum(m.memory_peak_mb for m in runs) / len(runs),
        }

    def _current_memory_mb(self, fallback: float) -> float:
        try:
            return psutil.Process().memory_info().rss / (1024 * 1024)
        except psutil.Error as e:
            self.logger.warning(f"Could not read process memory: {e}")
            return fallback
