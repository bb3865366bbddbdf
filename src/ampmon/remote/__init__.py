"""Talking to the amplifier's web UI through a browser page.

:class:`PageExtractor` scrapes tagged values, :class:`ButtonStateReconciler`
reads the mode-bearing button captions and :class:`ControlActuator` clicks
them. All three go through one :class:`SerializedSurface`. The browser
backends (:mod:`webengine_surface`, :mod:`playwright_surface`) are imported
explicitly by the entry points so this package stays importable without Qt
WebEngine or Playwright installed.
"""

from .button_state import ButtonState, ButtonStateReconciler
from .control_actuator import ActionOutcome, ControlAction, ControlActuator, OutcomeKind
from .page_extractor import PageExtractor
from .page_surface import (
    PageSurface,
    QueryTimeout,
    SerializedSurface,
    SurfaceError,
    SurfaceNotReady,
    decode_script_json,
    unwrap_script_result,
)

__all__ = [
    "ButtonState",
    "ButtonStateReconciler",
    "ActionOutcome",
    "ControlAction",
    "ControlActuator",
    "OutcomeKind",
    "PageExtractor",
    "PageSurface",
    "QueryTimeout",
    "SerializedSurface",
    "SurfaceError",
    "SurfaceNotReady",
    "decode_script_json",
    "unwrap_script_result",
]
