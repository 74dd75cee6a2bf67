# src/converter/utils/run_timers.py
import time
from typing import Dict, Optional


class RunTimers:
    """
    Measures the total run time plus named laps (one per pipeline step).
    Usable as a context manager.
    """

    def __init__(self):
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._lap_start: Optional[float] = None
        self.laps: Dict[str, float] = {}

    def __enter__(self) -> "RunTimers":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        self._start_time = time.perf_counter()
        self._lap_start = self._start_time
        self._end_time = None
        self.laps.clear()

    def lap(self, name: str) -> float:
        """Records the time since the previous lap (or start) under `name`, in ms."""
        now = time.perf_counter()
        if self._lap_start is None:
            self._lap_start = now
        elapsed = round((now - self._lap_start) * 1000, 2)
        self.laps[name] = elapsed
        self._lap_start = now
        return elapsed

    def stop(self) -> None:
        if self._start_time is not None:
            self._end_time = time.perf_counter()

    @property
    def duration(self) -> float:
        """Returns the elapsed time in seconds."""
        if self._start_time is None:
            return 0.0

        if self._end_time is None:
            return time.perf_counter() - self._start_time

        return self._end_time - self._start_time

    def __repr__(self) -> str:
        return f"<RunTimers duration={self.duration:.4f}s laps={len(self.laps)}>"
