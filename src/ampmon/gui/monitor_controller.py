from __future__ import annotations

import asyncio
import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from ..config.runtime import MonitorConfig
from ..core.pipeline_wiring import PipelineHandles, build_pipeline
from ..core.poll_loop import PollResult, PollStats
from ..remote.button_state import ButtonState
from ..remote.control_actuator import ActionOutcome, ConfirmCallback, ControlAction
from ..remote.webengine_surface import WebEngineSurface

logger = logging.getLogger(__name__)

# Loop statistics are published on a fixed wall-clock cadence.
STATS_INTERVAL_MS = 5000


class MonitorController(QObject):
    """Non-visual controller that owns the poll loop and re-emits results as Qt signals."""

    view_updated = Signal(object)  # DashboardView
    buttons_updated = Signal(object)  # ButtonState
    stats_updated = Signal(str)
    error_reported = Signal(str)
    action_finished = Signal(object)  # ActionOutcome

    def __init__(
        self,
        surface: WebEngineSurface,
        monitor_config: MonitorConfig | None = None,
        *,
        confirm: ConfirmCallback | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._surface = surface
        self._handles: PipelineHandles = build_pipeline(
            surface,
            monitor_config,
            publish=self._on_poll_result,
            confirm=confirm,
            notify=self.report_error,
            on_buttons=self._emit_buttons,
        )
        self._pending_actions: set[asyncio.Future] = set()
        self._stats_timer = QTimer(self)
        self._stats_timer.setInterval(STATS_INTERVAL_MS)
        self._stats_timer.timeout.connect(self._emit_stats)
        surface.ready_changed.connect(self._on_ready_changed)

    # --------------------------------------------------------------- accessors
    @property
    def surface(self) -> WebEngineSurface:
        return self._surface

    @property
    def stats(self) -> PollStats:
        return self._handles.poll_loop.stats

    def current_buttons(self) -> ButtonState:
        return self._handles.reconciler.current

    # --------------------------------------------------------------- start/stop
    def start(self, url: str) -> None:
        self._surface.navigate(url)
        self._handles.poll_loop.start()
        self._stats_timer.start()

    def stop(self) -> None:
        self._stats_timer.stop()
        self._handles.poll_loop.stop()
        for future in list(self._pending_actions):
            future.cancel()
        self._pending_actions.clear()

    # --------------------------------------------------------------- actions
    def request_action(self, action: ControlAction) -> None:
        """Schedule *action* on the event loop; the result arrives via ``action_finished``."""
        future = asyncio.ensure_future(self._run_action(action))
        self._pending_actions.add(future)
        future.add_done_callback(self._pending_actions.discard)

    async def _run_action(self, action: ControlAction) -> ActionOutcome:
        outcome = await self._handles.actuator.invoke(action)
        self.action_finished.emit(outcome)
        return outcome

    def report_error(self, message: str) -> None:
        logger.error("MonitorController error: %s", message)
        self.error_reported.emit(str(message))

    # --------------------------------------------------------------- callbacks
    def _on_poll_result(self, result: PollResult) -> None:
        self.view_updated.emit(result.view)
        if result.buttons is not None:
            self._emit_buttons(self._handles.reconciler.current)

    @Slot()
    def _emit_stats(self) -> None:
        self.stats_updated.emit(self._handles.poll_loop.stats.summary())

    def _emit_buttons(self, state: ButtonState) -> None:
        self.buttons_updated.emit(state)

    @Slot(bool)
    def _on_ready_changed(self, ready: bool) -> None:
        logger.info("Amplifier page %s", "ready" if ready else "loading")
        self.stats_updated.emit("Page ready" if ready else "Loading amplifier page …")
