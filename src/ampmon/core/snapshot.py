"""
Typed view of one scraped sample of the amplifier control panel.

The web UI tags every displayed value with a ``w-val`` attribute holding a
slash-delimited path, for example::

    $amp/controls/dashboard/values/forward_power   -> "1200 W"
    $amp/controls/atu/status                       -> "TUNED"

``to_snapshot()`` turns such a mapping into an :class:`AmpSnapshot`. Keys are
accepted either fully rooted or relative to their namespace root, so
``values/swr`` and ``$amp/controls/dashboard/values/swr`` address the same
field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

DASHBOARD_ROOT = "$amp/controls/dashboard/"
CONTROLS_ROOT = "$amp/controls/"

# Only the tuner subtree lives directly under the controls root.
_CONTROLS_SUBTREE = "atu/"

KEY_BAND_LOW = "band/band_low_border_mhz"
KEY_BAND_HIGH = "band/band_high_border_mhz"
KEY_CAT_ACTIVE = "indicators/cat_is_active"
KEY_LAST_CMD_REMOTE = "indicators/last_cmd_is_remote"
KEY_MODE = "switches/mode"
KEY_FORWARD_POWER = "values/forward_power"
KEY_REFLECTED_POWER = "values/reflected_power"
KEY_INPUT_POWER = "values/input_power"
KEY_DISSIPATED_POWER = "values/dissipated_power"
KEY_SWR = "values/swr"
KEY_POWER_GAIN = "values/power_gain"
KEY_BIAS_LEFT = "values/bias/bias_1a"
KEY_BIAS_RIGHT = "values/bias/bias_1b"
KEY_DC_VOLTAGE = "values/hv/hv1"
KEY_DC_CURRENT = "values/id/id1"
KEY_TEMPERATURE = "values/temperature_c"
KEY_TEMPERATURE_TREND = "values/temperature_rel"
KEY_TUNER_STATUS = "atu/status"
KEY_TUNER_SWR = "atu/measure/values/swr"
KEY_TUNER_TEMPERATURE = "atu/measure/values/temperature"

_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?")


@dataclass(frozen=True)
class BandInfo:
    low_mhz: str = ""
    high_mhz: str = ""


@dataclass(frozen=True)
class Indicators:
    cat_active: bool = False
    last_command_remote: bool = False


@dataclass(frozen=True)
class Dashboard:
    forward_power_w: Optional[float] = None
    reflected_power_w: Optional[float] = None
    input_power_w: Optional[float] = None
    dissipated_power_w: Optional[float] = None
    swr: Optional[float] = None
    gain_db: Optional[float] = None
    bias_left_v: Optional[float] = None
    bias_right_v: Optional[float] = None
    dc_voltage_v: Optional[float] = None
    dc_current_a: Optional[float] = None
    temperature_c: Optional[float] = None
    temperature_trend: str = ""


@dataclass(frozen=True)
class TunerInfo:
    status: str = ""
    swr: Optional[float] = None
    temperature_c: Optional[float] = None


@dataclass(frozen=True)
class AmpSnapshot:
    band: BandInfo = field(default_factory=BandInfo)
    indicators: Indicators = field(default_factory=Indicators)
    mode: str = ""
    dashboard: Dashboard = field(default_factory=Dashboard)
    tuner: TunerInfo = field(default_factory=TunerInfo)


def parse_number(text: Optional[str]) -> Optional[float]:
    """
    Extract the first number embedded in a displayed value.

    Units and labels around the number are ignored (``"SWR 1.35:1"`` -> 1.35)
    and a decimal comma is accepted (``"1,35"`` -> 1.35). Returns ``None`` for
    blank text or text without digits.
    """
    if text is None or not text.strip():
        return None
    match = _NUMBER_RE.search(text.replace(",", "."))
    if match is None:
        return None
    return float(match.group(0))


def relative_key(key: str) -> str:
    """
    Strip the namespace root from a rooted key.

    Keys under the controls root other than ``atu/...`` are returned unchanged
    so they can never shadow a dashboard field.
    """
    if key.startswith(DASHBOARD_ROOT):
        return key[len(DASHBOARD_ROOT):]
    if key.startswith(CONTROLS_ROOT + _CONTROLS_SUBTREE):
        return key[len(CONTROLS_ROOT):]
    return key


def _relative_view(raw: Mapping[str, str]) -> Dict[str, str]:
    # Rooted keys win over relative duplicates.
    view: Dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            continue
        rel = relative_key(key)
        if rel in view and rel == key:
            continue
        view[rel] = "" if value is None else str(value)
    return view


def _flag(text: str, marker: str) -> bool:
    return marker.lower() in text.lower()


def to_snapshot(raw: Mapping[str, str]) -> AmpSnapshot:
    """Map one scraped sample onto an :class:`AmpSnapshot`. Never raises."""
    d = _relative_view(raw or {})

    def text(key: str) -> str:
        return d.get(key, "")

    def num(key: str) -> Optional[float]:
        return parse_number(d.get(key))

    return AmpSnapshot(
        band=BandInfo(low_mhz=text(KEY_BAND_LOW), high_mhz=text(KEY_BAND_HIGH)),
        indicators=Indicators(
            cat_active=_flag(text(KEY_CAT_ACTIVE), "ON"),
            last_command_remote=_flag(text(KEY_LAST_CMD_REMOTE), "RC"),
        ),
        mode=text(KEY_MODE),
        dashboard=Dashboard(
            forward_power_w=num(KEY_FORWARD_POWER),
            reflected_power_w=num(KEY_REFLECTED_POWER),
            input_power_w=num(KEY_INPUT_POWER),
            dissipated_power_w=num(KEY_DISSIPATED_POWER),
            swr=num(KEY_SWR),
            gain_db=num(KEY_POWER_GAIN),
            bias_left_v=num(KEY_BIAS_LEFT),
            bias_right_v=num(KEY_BIAS_RIGHT),
            dc_voltage_v=num(KEY_DC_VOLTAGE),
            dc_current_a=num(KEY_DC_CURRENT),
            temperature_c=num(KEY_TEMPERATURE),
            temperature_trend=text(KEY_TEMPERATURE_TREND),
        ),
        tuner=TunerInfo(
            status=text(KEY_TUNER_STATUS),
            swr=num(KEY_TUNER_SWR),
            temperature_c=num(KEY_TUNER_TEMPERATURE),
        ),
    )
