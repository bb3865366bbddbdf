"""Click the amplifier's own web UI buttons on behalf of the user."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .button_state import (
    BYPASS_PREDICATE,
    OK_PREDICATE,
    POWER_OFF_CAPTION,
    POWER_PREDICATE,
    STANDBY_PREDICATE,
    TUNE_PREDICATE,
    ButtonState,
    ButtonStateReconciler,
    find_button_js,
)
from .page_surface import SerializedSurface

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], Awaitable[bool]]
NotifyCallback = Callable[[str], None]
ButtonsCallback = Callable[[ButtonState], None]

POWER_OFF_PROMPT = "Are you sure you want to power off the amplifier?"


class ControlAction(enum.Enum):
    STANDBY = "standby"
    TUNE = "tune"
    BYPASS = "bypass"
    POWER_TOGGLE = "power"

    @property
    def display_name(self) -> str:
        return {
            ControlAction.STANDBY: "Standby/Operate",
            ControlAction.TUNE: "Tune",
            ControlAction.BYPASS: "Bypass",
            ControlAction.POWER_TOGGLE: "Power",
        }[self]


_ACTION_PREDICATES = {
    ControlAction.STANDBY: STANDBY_PREDICATE,
    ControlAction.TUNE: TUNE_PREDICATE,
    ControlAction.BYPASS: BYPASS_PREDICATE,
    ControlAction.POWER_TOGGLE: POWER_PREDICATE,
}


def build_click_script(predicate: str) -> str:
    """Script that clicks the first button matching *predicate* and reports it."""
    return f"""
(() => {{
  const btn = {find_button_js(predicate)};
  if (!btn) return JSON.stringify({{clicked: false, label: ''}});
  btn.click();
  return JSON.stringify({{clicked: true, label: btn.textContent.trim()}});
}})();
"""


class OutcomeKind(enum.Enum):
    CLICKED = "clicked"
    NOT_FOUND = "not_found"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionOutcome:
    kind: OutcomeKind
    label: str = ""
    message: str = ""

    @classmethod
    def clicked(cls, label: str) -> ActionOutcome:
        return cls(OutcomeKind.CLICKED, label=label)

    @classmethod
    def not_found(cls) -> ActionOutcome:
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def declined(cls) -> ActionOutcome:
        return cls(OutcomeKind.DECLINED)

    @classmethod
    def failed(cls, message: str) -> ActionOutcome:
        return cls(OutcomeKind.FAILED, message=message)

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.CLICKED


async def _always_confirm(_message: str) -> bool:
    return True


class ControlActuator:
    """
    Translate user commands into search-and-click operations on the page.

    Parameters
    ----------
    surface:
        Serialized page handle shared with the poll loop.
    reconciler:
        Source of the current power caption and target of the post-power
        refresh.
    confirm:
        Async yes/no prompt, consulted before powering the amplifier off.
    notify:
        Non-fatal error sink (e.g. a message box).
    on_buttons:
        Receives the refreshed captions after a power toggle.
    """

    def __init__(
        self,
        surface: SerializedSurface,
        reconciler: ButtonStateReconciler,
        *,
        confirm: ConfirmCallback | None = None,
        notify: NotifyCallback | None = None,
        on_buttons: ButtonsCallback | None = None,
        confirm_dialog_delay_s: float = 0.1,
        settle_delay_s: float = 0.5,
    ) -> None:
        self._surface = surface
        self._reconciler = reconciler
        self._confirm = confirm or _always_confirm
        self._notify = notify
        self._on_buttons = on_buttons
        self._confirm_dialog_delay_s = max(0.0, float(confirm_dialog_delay_s))
        self._settle_delay_s = max(0.0, float(settle_delay_s))

    async def invoke(self, action: ControlAction) -> ActionOutcome:
        if not self._surface.ready:
            logger.info("Ignoring %s: page not loaded yet", action.value)
            return ActionOutcome.failed("page not ready")

        if action is ControlAction.POWER_TOGGLE:
            if self._reconciler.current.power == POWER_OFF_CAPTION:
                if not await self._confirm(POWER_OFF_PROMPT):
                    logger.info("Power off cancelled by user")
                    return ActionOutcome.declined()

        try:
            outcome = await self._click(_ACTION_PREDICATES[action])
        except Exception as exc:
            message = f"{action.display_name} error: {exc}"
            logger.warning("%s", message)
            self._report(message)
            return ActionOutcome.failed(message)

        if outcome.kind is OutcomeKind.NOT_FOUND:
            self._report(f"{action.display_name} button not found")
            return outcome

        logger.info("Clicked %r for %s", outcome.label, action.value)
        if action is ControlAction.POWER_TOGGLE:
            await self._confirm_in_page()
            await self._refresh_buttons()
        return outcome

    async def _click(self, predicate: str) -> ActionOutcome:
        payload = await self._surface.query_json(build_click_script(predicate))
        if isinstance(payload, dict) and payload.get("clicked"):
            return ActionOutcome.clicked(str(payload.get("label") or ""))
        return ActionOutcome.not_found()

    async def _confirm_in_page(self) -> None:
        """Best-effort click on the page's own "OK" prompt."""
        await asyncio.sleep(self._confirm_dialog_delay_s)
        try:
            outcome = await self._click(OK_PREDICATE)
        except Exception as exc:
            logger.debug("In-page OK click failed: %s", exc)
            return
        if not outcome.ok:
            logger.debug("No in-page OK button after power toggle")

    async def _refresh_buttons(self) -> None:
        await asyncio.sleep(self._settle_delay_s)
        state = await self._reconciler.reconcile()
        if state is not None and self._on_buttons is not None:
            try:
                self._on_buttons(self._reconciler.current)
            except Exception:
                logger.exception("Button state callback failed")

    def _report(self, message: str) -> None:
        if self._notify is None:
            logger.warning("%s", message)
            return
        try:
            self._notify(message)
        except Exception:
            logger.exception("Notification callback failed")
