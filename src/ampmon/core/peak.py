from __future__ import annotations

import time
from typing import Callable, Dict, Iterable, Optional

DEFAULT_HOLD_SECONDS = 3.0

# Channels smoothed by the dashboard, in display order.
PEAK_CHANNELS: tuple[str, ...] = (
    "forward_power",
    "reflected_power",
    "input_power",
    "gain",
    "swr",
    "temperature",
)


class PeakTracker:
    """
    Peak-hold smoother for one noisy reading.

    A new maximum is shown immediately and held for ``hold_seconds``; once the
    hold expires the next reading replaces it, even if lower.

    Notes
    -----
    - The comparison is strict: repeating the current peak does not extend
      the hold window.
    - ``None`` readings leave the state untouched.
    """

    def __init__(
        self,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if hold_seconds < 0:
            raise ValueError("hold_seconds must be >= 0")
        self.hold_seconds = float(hold_seconds)
        self._clock = clock
        self._current: Optional[float] = None
        self._last_update: float = float("-inf")

    @property
    def current(self) -> Optional[float]:
        return self._current

    @property
    def last_update(self) -> float:
        return self._last_update

    def update(self, value: Optional[float]) -> Optional[float]:
        """Feed one reading and return the value to display this cycle."""
        if value is None:
            return self._current

        now = self._clock()
        if self._current is None or value > self._current:
            self._current = value
            self._last_update = now
        elif now - self._last_update > self.hold_seconds:
            self._current = value
            self._last_update = now
        return self._current

    def reset(self) -> None:
        self._current = None
        self._last_update = float("-inf")


class PeakBank:
    """Fixed, named set of :class:`PeakTracker` instances."""

    def __init__(
        self,
        channels: Iterable[str] = PEAK_CHANNELS,
        *,
        hold_seconds: float = DEFAULT_HOLD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._trackers: Dict[str, PeakTracker] = {
            name: PeakTracker(hold_seconds, clock=clock) for name in channels
        }

    @property
    def channels(self) -> tuple[str, ...]:
        return tuple(self._trackers)

    def tracker(self, channel: str) -> PeakTracker:
        return self._trackers[channel]

    def update(self, channel: str, value: Optional[float]) -> Optional[float]:
        return self._trackers[channel].update(value)

    def get(self, channel: str) -> Optional[float]:
        return self._trackers[channel].current

    def reset(self) -> None:
        for tracker in self._trackers.values():
            tracker.reset()
