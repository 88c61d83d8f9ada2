"""Rolling frames-per-second statistics for the diagnostic readout."""

from collections import deque
from typing import NamedTuple, Optional
import time

from .config import FRAME_HISTORY


class FrameStats(NamedTuple):
    """Rounded frame rate figures over the recent history."""
    latest: int
    mean: int
    min: int
    max: int


class FrameStatsTracker:
    """Keeps the last ``capacity`` instantaneous fps samples.

    One sample is recorded per call to ``record_frame``, derived from the
    time elapsed since the previous call. The first call has nothing to
    measure against and only primes the timestamp.
    """

    def __init__(self, capacity: int = FRAME_HISTORY):
        self._frames: deque[float] = deque(maxlen=capacity)
        self._last_timestamp: Optional[float] = None
        self._latest = 0.0
        self._mean = 0.0
        self._min = 0.0
        self._max = 0.0

    @property
    def capacity(self) -> int:
        return self._frames.maxlen

    @property
    def samples(self) -> tuple:
        return tuple(self._frames)

    def record_frame(self, now_ms: Optional[float] = None) -> Optional[float]:
        """Record a frame at ``now_ms`` (milliseconds, monotonic).

        Returns the instantaneous fps sample, or None when no sample was
        taken (first frame, or a zero/negative delta).
        """
        if now_ms is None:
            now_ms = time.perf_counter() * 1000.0

        last = self._last_timestamp
        self._last_timestamp = now_ms
        if last is None:
            return None

        delta = now_ms - last
        if delta <= 0:
            return None

        fps = 1000.0 / delta
        self._frames.append(fps)

        # O(history) per frame, no incremental aggregation
        self._latest = fps
        self._mean = sum(self._frames) / len(self._frames)
        self._min = min(self._frames)
        self._max = max(self._frames)
        return fps

    def snapshot(self) -> FrameStats:
        if not self._frames:
            return FrameStats(0, 0, 0, 0)
        return FrameStats(
            latest=round(self._latest),
            mean=round(self._mean),
            min=round(self._min),
            max=round(self._max),
        )

    def format(self) -> str:
        stats = self.snapshot()
        n = self.capacity
        return "\n".join([
            "Frames per Second:",
            f"latest = {stats.latest}",
            f"avg of last {n} = {stats.mean}",
            f"min of last {n} = {stats.min}",
            f"max of last {n} = {stats.max}",
        ])

    def reset(self):
        self._frames.clear()
        self._last_timestamp = None
        self._latest = self._mean = self._min = self._max = 0.0
