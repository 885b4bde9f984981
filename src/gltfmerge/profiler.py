from __future__ import annotations
import time
from contextlib import contextmanager

from .logging import get_logger


class Profiler:
    """Wall clock time spent in each pass of one merge."""

    def __init__(self):
        self._timings: dict[str, float] = {}
        self.logger = get_logger("Profiler")

    @contextmanager
    def record(self, name: str):
        start_t = time.perf_counter()
        try:
            yield
        finally:
            dt = time.perf_counter() - start_t
            # a pass entered twice accumulates
            self._timings[name] = self._timings.get(name, 0.0) + dt

    def get_timings(self) -> dict[str, float]:
        return dict(self._timings)

    def log_stats(self):
        stats = [f"{k}: {v*1000:.2f}ms" for k, v in self._timings.items()]
        self.logger.debug(" | ".join(stats))
