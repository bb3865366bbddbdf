"""Display-ready strings for one poll cycle."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .peak import PeakBank
from .snapshot import AmpSnapshot

SWR_WARNING_COLOR = "#ff4500"  # OrangeRed
SWR_NOMINAL_COLOR = "#32cd32"  # LimeGreen
SWR_ALERT_THRESHOLD = 2.0


@dataclass(frozen=True)
class DashboardView:
    forward_power: str = ""
    reflected_power: str = ""
    input_power: str = ""
    gain: str = ""
    swr: str = ""
    temperature: str = ""
    dc_voltage: str = ""
    dc_current: str = ""
    bias_left: str = ""
    bias_right: str = ""
    dissipated_power: str = ""
    temperature_trend: str = ""
    band: str = ""
    mode: str = ""
    tuner_status: str = ""
    tuner_swr: str = ""
    tuner_temperature: str = ""
    cat: str = "CAT OFF"
    remote: str = ""
    swr_alert: bool = False
    swr_color: str = SWR_NOMINAL_COLOR


def format_value(value: Optional[float], places: int, suffix: str = "") -> str:
    """
    Format *value* with *places* decimals; unknown values render as "".

    Halves round away from zero (1200.5 -> "1201") and a result of zero is
    never shown with a minus sign.
    """
    if value is None:
        return ""
    rounded = Decimal(str(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:f}{suffix}"


def swr_alert(swr: Optional[float]) -> bool:
    """True when the SWR reading is above the warning threshold (unknown counts as 1.0)."""
    return (swr if swr is not None else 1.0) > SWR_ALERT_THRESHOLD


def swr_color(swr: Optional[float]) -> str:
    return SWR_WARNING_COLOR if swr_alert(swr) else SWR_NOMINAL_COLOR


def build_view(snapshot: AmpSnapshot, peaks: PeakBank) -> DashboardView:
    """
    Run the smoothed channels through *peaks* and format everything for display.

    Peak-held: forward/reflected/input power, gain, SWR, temperature. The SWR
    color follows the instantaneous reading, not the held one.
    """
    dash = snapshot.dashboard
    fwd = peaks.update("forward_power", dash.forward_power_w)
    ref = peaks.update("reflected_power", dash.reflected_power_w)
    inp = peaks.update("input_power", dash.input_power_w)
    gain = peaks.update("gain", dash.gain_db)
    swr = peaks.update("swr", dash.swr)
    temp = peaks.update("temperature", dash.temperature_c)

    return DashboardView(
        forward_power=format_value(fwd, 0, " W"),
        reflected_power=format_value(ref, 0, " W"),
        input_power=format_value(inp, 0, " W"),
        gain=format_value(gain, 1, " dB"),
        swr=format_value(swr, 2),
        temperature=format_value(temp, 0, " °C"),
        dc_voltage=format_value(dash.dc_voltage_v, 1, " V"),
        dc_current=format_value(dash.dc_current_a, 1, " A"),
        bias_left=format_value(dash.bias_left_v, 2, " V"),
        bias_right=format_value(dash.bias_right_v, 2, " V"),
        dissipated_power=format_value(dash.dissipated_power_w, 0, " W"),
        temperature_trend=dash.temperature_trend,
        band=f"{snapshot.band.low_mhz} – {snapshot.band.high_mhz}",
        mode=snapshot.mode,
        tuner_status=snapshot.tuner.status,
        tuner_swr=format_value(snapshot.tuner.swr, 2),
        tuner_temperature=format_value(snapshot.tuner.temperature_c, 0, " °C"),
        cat="CAT ON" if snapshot.indicators.cat_active else "CAT OFF",
        remote="RC" if snapshot.indicators.last_command_remote else "",
        swr_alert=swr_alert(dash.swr),
        swr_color=swr_color(dash.swr),
    )
