from __future__ import annotations

import asyncio
import json
from typing import Callable, Dict, List, Optional

import pytest

from ampmon.remote.button_state import (
    BUTTON_STATE_SCRIPT,
    BYPASS_PREDICATE,
    OK_PREDICATE,
    POWER_PREDICATE,
    STANDBY_PREDICATE,
    TUNE_PREDICATE,
)

# Python equivalents of the in-page button predicates.
_PREDICATES: Dict[str, Callable[[str], bool]] = {
    STANDBY_PREDICATE: lambda t: t.strip() in ("OPERATE", "STANDBY"),
    BYPASS_PREDICATE: lambda t: "BYPASS" in t,
    POWER_PREDICATE: lambda t: t.strip() in ("POWER OFF", "POWER ON"),
    TUNE_PREDICATE: lambda t: t.strip() == "TUNE",
    OK_PREDICATE: lambda t: t.strip() == "OK",
}

_TOGGLES = {
    "OPERATE": "STANDBY",
    "STANDBY": "OPERATE",
    "POWER OFF": "POWER ON",
    "POWER ON": "POWER OFF",
}


class FakeSurface:
    """
    In-memory stand-in for the amplifier page.

    ``values`` is what the tagged elements display, ``buttons`` the captions
    of the <button> elements. Scripts are recognised by content and answered
    the way a browser would. ``quote_results`` wraps every result in one extra
    layer of JSON string quoting, as some embedded browsers do.
    """

    def __init__(
        self,
        values: Optional[Dict[str, str]] = None,
        buttons: Optional[List[str]] = None,
        *,
        ready: bool = True,
        quote_results: bool = False,
    ) -> None:
        self.values: Dict[str, str] = dict(values or {})
        self.buttons: List[str] = list(buttons or [])
        self.ready = ready
        self.quote_results = quote_results
        self.scripts: List[str] = []
        self.clicked: List[str] = []
        self.fail_with: Optional[BaseException] = None
        self.delay_s: float = 0.0
        self.active = 0
        self.max_active = 0

    def _find(self, predicate: str) -> Optional[int]:
        test = _PREDICATES[predicate]
        for index, caption in enumerate(self.buttons):
            if test(caption):
                return index
        return None

    def _click(self, script: str) -> str:
        for predicate in _PREDICATES:
            if predicate in script:
                index = self._find(predicate)
                if index is None:
                    return json.dumps({"clicked": False, "label": ""})
                label = self.buttons[index].strip()
                self.clicked.append(label)
                if label == "OK":
                    del self.buttons[index]
                elif label in _TOGGLES:
                    self.buttons[index] = _TOGGLES[label]
                    if label.startswith("POWER"):
                        self.buttons.append("OK")
                return json.dumps({"clicked": True, "label": label})
        raise AssertionError(f"unrecognised click script: {script!r}")

    def _answer(self, script: str) -> str:
        if script == BUTTON_STATE_SCRIPT:
            def caption(predicate: str) -> str:
                index = self._find(predicate)
                return "" if index is None else self.buttons[index].strip()

            return json.dumps(
                {
                    "standby": caption(STANDBY_PREDICATE),
                    "bypass": caption(BYPASS_PREDICATE),
                    "power": caption(POWER_PREDICATE),
                }
            )
        if "btn.click()" in script:
            return self._click(script)
        if "querySelectorAll('[' + attr + ']')" in script:
            return json.dumps(self.values)
        raise AssertionError(f"unrecognised script: {script!r}")

    async def run_query(self, script: str) -> Optional[str]:
        self.scripts.append(script)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay_s:
                await asyncio.sleep(self.delay_s)
            if self.fail_with is not None:
                raise self.fail_with
            result = self._answer(script)
        finally:
            self.active -= 1
        return json.dumps(result) if self.quote_results else result


@pytest.fixture
def fake_surface() -> FakeSurface:
    return FakeSurface()
