"""Fixed-interval acquisition loop: scrape, map, smooth, publish."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Protocol

from .peak import PeakBank
from .snapshot import AmpSnapshot, to_snapshot
from .view_model import DashboardView, build_view
from ..tools.debug import debug_enabled, time_block

logger = logging.getLogger(__name__)


class SampleSource(Protocol):
    async def extract(self) -> Dict[str, str]: ...


class ButtonSource(Protocol):
    async def reconcile(self) -> Optional[object]: ...


@dataclass
class PollResult:
    """Everything one successful cycle produced."""

    raw: Dict[str, str]
    snapshot: AmpSnapshot
    view: DashboardView
    buttons: Optional[object] = None


@dataclass
class PollStats:
    """Counters describing loop health; skipped cycles are never shown to the user."""

    cycles: int = 0
    samples: int = 0
    skipped: int = 0
    errors: int = 0
    overruns: int = 0
    last_error: str = ""

    def summary(self) -> str:
        return (
            f"cycles={self.cycles} samples={self.samples} skipped={self.skipped} "
            f"errors={self.errors} overruns={self.overruns}"
        )


Publisher = Callable[[PollResult], None]


class PollLoop:
    """
    Drive the acquisition pipeline on a fixed interval.

    Each cycle is awaited to completion before the next one is scheduled, so
    cycles never overlap. A cycle that takes longer than the interval is
    counted in ``stats.overruns`` and the next one starts right after it;
    missed ticks are dropped rather than queued.

    Any failure inside a cycle (page not ready, query error or timeout, bad
    JSON) only skips that cycle.
    """

    def __init__(
        self,
        extractor: SampleSource,
        *,
        reconciler: ButtonSource | None = None,
        peaks: PeakBank | None = None,
        publish: Publisher | None = None,
        interval_s: float = 0.25,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._extractor = extractor
        self._reconciler = reconciler
        self._peaks = peaks or PeakBank()
        self._publish = publish
        self._interval_s = float(interval_s)
        self._clock = clock
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self.stats = PollStats()

    @property
    def peaks(self) -> PeakBank:
        return self._peaks

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def set_publisher(self, publish: Publisher | None) -> None:
        self._publish = publish

    async def poll_once(self) -> Optional[PollResult]:
        """Run a single cycle; returns ``None`` when the cycle was skipped."""
        self.stats.cycles += 1
        with time_block("poll cycle"):
            try:
                raw = await self._extractor.extract()
            except Exception as exc:
                self._skip(f"extract failed: {exc!r}", error=True)
                return None

            if not raw:
                self._skip("no sample")
                return None

            snapshot = to_snapshot(raw)
            view = build_view(snapshot, self._peaks)
            self.stats.samples += 1

            buttons = None
            if self._reconciler is not None:
                buttons = await self._reconciler.reconcile()

            result = PollResult(raw=raw, snapshot=snapshot, view=view, buttons=buttons)
            if self._publish is not None:
                try:
                    self._publish(result)
                except Exception:
                    logger.exception("Poll result publisher failed")
            return result

    def _skip(self, reason: str, *, error: bool = False) -> None:
        self.stats.skipped += 1
        if error:
            self.stats.errors += 1
            self.stats.last_error = reason
        logger.debug("Skipping poll cycle: %s", reason)

    async def run(self, max_cycles: int | None = None) -> None:
        """Poll until cancelled (or until *max_cycles* cycles have run)."""
        logger.info("Poll loop started (interval %.0f ms)", self._interval_s * 1000.0)
        count = 0
        try:
            while max_cycles is None or count < max_cycles:
                started = self._clock()
                await self.poll_once()
                count += 1
                elapsed = self._clock() - started
                if elapsed >= self._interval_s:
                    self.stats.overruns += 1
                    if debug_enabled():
                        logger.debug("Poll cycle overran: %.1f ms", elapsed * 1000.0)
                    delay = 0.0
                else:
                    delay = self._interval_s - elapsed
                if max_cycles is not None and count >= max_cycles:
                    break
                await self._sleep(delay)
        finally:
            logger.info("Poll loop stopped (%s)", self.stats.summary())

    def start(self) -> asyncio.Task:
        """Schedule :meth:`run` on the running event loop."""
        task = self._task
        if task is not None and not task.done():
            return task
        self._task = asyncio.ensure_future(self.run())
        return self._task

    def stop(self) -> None:
        """Cancel the loop task; an in-flight cycle's result is discarded."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
