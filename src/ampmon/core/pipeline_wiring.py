"""Factory helpers that wire the monitor pipeline around one page surface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config.runtime import MonitorConfig
from ..remote.button_state import ButtonStateReconciler
from ..remote.control_actuator import (
    ButtonsCallback,
    ConfirmCallback,
    ControlActuator,
    NotifyCallback,
)
from ..remote.page_extractor import PageExtractor
from ..remote.page_surface import PageSurface, SerializedSurface
from .peak import PeakBank
from .poll_loop import PollLoop, Publisher


@dataclass(slots=True)
class PipelineHandles:
    """Return value from :func:`build_pipeline` containing ready-to-use pieces."""

    surface: SerializedSurface
    extractor: PageExtractor
    reconciler: ButtonStateReconciler
    actuator: ControlActuator
    poll_loop: PollLoop


def build_pipeline(
    surface: PageSurface,
    cfg: MonitorConfig | None = None,
    *,
    publish: Optional[Publisher] = None,
    confirm: Optional[ConfirmCallback] = None,
    notify: Optional[NotifyCallback] = None,
    on_buttons: Optional[ButtonsCallback] = None,
) -> PipelineHandles:
    """
    Build extractor, reconciler, actuator and poll loop sharing one serialized surface.

    Parameters
    ----------
    surface:
        Browser backend (Qt WebEngine page, Playwright page, or a test fake).
    cfg:
        Runtime configuration (usually loaded from YAML).
    publish:
        Receives every successful :class:`~ampmon.core.poll_loop.PollResult`.
    confirm, notify, on_buttons:
        User-facing collaborators forwarded to :class:`ControlActuator`.
    """

    normalized = (cfg or MonitorConfig()).sanitized()

    serialized = SerializedSurface(surface, timeout_s=normalized.query_timeout_s)
    extractor = PageExtractor(serialized, marker_attribute=normalized.marker_attribute)
    reconciler = ButtonStateReconciler(serialized)
    actuator = ControlActuator(
        serialized,
        reconciler,
        confirm=confirm,
        notify=notify,
        on_buttons=on_buttons,
        confirm_dialog_delay_s=normalized.confirm_dialog_delay_s,
        settle_delay_s=normalized.settle_delay_s,
    )
    poll_loop = PollLoop(
        extractor,
        reconciler=reconciler,
        peaks=PeakBank(hold_seconds=normalized.hold_seconds),
        publish=publish,
        interval_s=normalized.poll_interval_s,
    )
    return PipelineHandles(
        surface=serialized,
        extractor=extractor,
        reconciler=reconciler,
        actuator=actuator,
        poll_loop=poll_loop,
    )


__all__ = ["PipelineHandles", "build_pipeline"]
