from __future__ import annotations

import pytest

from ampmon.core.peak import PeakBank
from ampmon.core.snapshot import to_snapshot
from ampmon.core.view_model import (
    SWR_NOMINAL_COLOR,
    SWR_WARNING_COLOR,
    build_view,
    format_value,
    swr_color,
)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_nominal_color_for_moderate_swr() -> None:
    view = build_view(
        to_snapshot(
            {
                "values/forward_power": "1200 W",
                "values/swr": "1.8",
                "indicators/cat_is_active": "CAT ON",
            }
        ),
        PeakBank(),
    )
    assert view.forward_power == "1200 W"
    assert view.swr == "1.80"
    assert view.cat == "CAT ON"
    assert view.swr_color == SWR_NOMINAL_COLOR
    assert view.swr_alert is False


def test_warning_color_above_threshold() -> None:
    view = build_view(to_snapshot({"values/swr": "2.5"}), PeakBank())
    assert view.swr_color == SWR_WARNING_COLOR
    assert view.swr_alert is True


def test_unknown_swr_is_treated_as_safe() -> None:
    assert swr_color(None) == SWR_NOMINAL_COLOR
    assert swr_color(2.0) == SWR_NOMINAL_COLOR
    assert swr_color(2.01) == SWR_WARNING_COLOR


def test_formatting_units_and_precision() -> None:
    raw = {
        "values/reflected_power": "12.4 W",
        "values/input_power": "35 W",
        "values/power_gain": "15.26 dB",
        "values/temperature_c": "41.6 C",
        "values/hv/hv1": "48.04 V",
        "values/id/id1": "22.96 A",
        "values/bias/bias_1a": "2.5 V",
        "values/bias/bias_1b": "2.514 V",
        "values/dissipated_power": "612.2 W",
        "band/band_low_border_mhz": "7.000",
        "band/band_high_border_mhz": "7.200",
        "indicators/last_cmd_is_remote": "RC",
    }
    view = build_view(to_snapshot(raw), PeakBank())
    assert view.reflected_power == "12 W"
    assert view.input_power == "35 W"
    assert view.gain == "15.3 dB"
    assert view.temperature == "42 °C"
    assert view.dc_voltage == "48.0 V"
    assert view.dc_current == "23.0 A"
    assert view.bias_left == "2.50 V"
    assert view.bias_right == "2.51 V"
    assert view.dissipated_power == "612 W"
    assert view.band == "7.000 – 7.200"
    assert view.remote == "RC"
    assert view.cat == "CAT OFF"


def test_missing_values_render_empty() -> None:
    view = build_view(to_snapshot({}), PeakBank())
    assert view.forward_power == ""
    assert view.swr == ""
    assert view.tuner_swr == ""
    assert format_value(None, 0, " W") == ""


def test_view_shows_held_peak_but_colors_instant_swr() -> None:
    clock = FakeClock()
    peaks = PeakBank(hold_seconds=3.0, clock=clock)
    build_view(to_snapshot({"values/swr": "2.6", "values/forward_power": "1000 W"}), peaks)
    clock.now = 0.5
    view = build_view(to_snapshot({"values/swr": "1.3", "values/forward_power": "400 W"}), peaks)
    assert view.forward_power == "1000 W"
    assert view.swr == "2.60"
    assert view.swr_color == SWR_NOMINAL_COLOR


@pytest.mark.parametrize(
    "value, places, expected",
    [
        (1200.5, 0, "1201"),
        (1199.5, 0, "1200"),
        (-2.5, 0, "-3"),
        (2.675, 2, "2.68"),
        (0.05, 1, "0.1"),
        (-0.2, 0, "0"),
        (-0.004, 2, "0.00"),
        (-1.26, 1, "-1.3"),
    ],
)
def test_format_value_rounds_halves_away_from_zero(value: float, places: int, expected: str) -> None:
    assert format_value(value, places) == expected


def test_small_negative_power_renders_without_sign() -> None:
    view = build_view(to_snapshot({"values/reflected_power": "-0.3 W"}), PeakBank())
    assert view.reflected_power == "0 W"
