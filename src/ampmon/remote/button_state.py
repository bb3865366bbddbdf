"""Read control-button captions (device mode) from the live page."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .page_surface import SerializedSurface

logger = logging.getLogger(__name__)

# JavaScript predicates over a <button> element ``b``. Shared with the
# control actuator so reading and clicking target the same buttons.
STANDBY_PREDICATE = "['OPERATE', 'STANDBY'].includes(b.textContent.trim())"
BYPASS_PREDICATE = "b.textContent.includes('BYPASS')"
POWER_PREDICATE = "['POWER OFF', 'POWER ON'].includes(b.textContent.trim())"
TUNE_PREDICATE = "b.textContent.trim() === 'TUNE'"
OK_PREDICATE = "b.textContent.trim() === 'OK'"

POWER_OFF_CAPTION = "POWER OFF"


def find_button_js(predicate: str) -> str:
    """JavaScript expression evaluating to the first matching button (or undefined)."""
    return f"Array.from(document.querySelectorAll('button')).find(b => {predicate})"


BUTTON_STATE_SCRIPT = f"""
(() => {{
  const caption = btn => (btn ? btn.textContent.trim() : '');
  return JSON.stringify({{
    standby: caption({find_button_js(STANDBY_PREDICATE)}),
    bypass: caption({find_button_js(BYPASS_PREDICATE)}),
    power: caption({find_button_js(POWER_PREDICATE)})
  }});
}})();
"""


@dataclass(frozen=True)
class ButtonState:
    standby: str = ""
    bypass: str = ""
    power: str = ""

    def merged_into(self, previous: ButtonState) -> ButtonState:
        """Return *previous* updated with this state's non-empty captions."""
        return replace(
            previous,
            standby=self.standby or previous.standby,
            bypass=self.bypass or previous.bypass,
            power=self.power or previous.power,
        )


class ButtonStateReconciler:
    """
    Query the page for the standby/bypass/power buttons.

    ``current`` keeps the last non-empty caption of each button so a button
    that briefly disappears does not blank the displayed caption.
    """

    def __init__(self, surface: SerializedSurface) -> None:
        self._surface = surface
        self._current = ButtonState()

    @property
    def current(self) -> ButtonState:
        return self._current

    async def reconcile(self) -> Optional[ButtonState]:
        """
        Return the captions found on the page, or ``None`` on any failure.

        Failures are logged at debug level only; the next poll retries.
        """
        if not self._surface.ready:
            return None
        try:
            payload = await self._surface.query_json(BUTTON_STATE_SCRIPT)
        except Exception as exc:
            logger.debug("Button state query failed: %s", exc)
            return None

        if not isinstance(payload, dict):
            return None

        state = ButtonState(
            standby=_caption(payload.get("standby")),
            bypass=_caption(payload.get("bypass")),
            power=_caption(payload.get("power")),
        )
        self._current = state.merged_into(self._current)
        return state


def _caption(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()

