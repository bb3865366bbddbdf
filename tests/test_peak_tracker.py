from __future__ import annotations

import pytest

from ampmon.core.peak import PEAK_CHANNELS, PeakBank, PeakTracker


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_lower_value_within_hold_keeps_peak() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    assert tracker.update(5.0) == 5.0
    clock.advance(1.0)
    assert tracker.update(3.0) == 5.0


def test_lower_value_after_hold_replaces_peak() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    tracker.update(5.0)
    clock.advance(3.5)
    assert tracker.update(3.0) == 3.0
    assert tracker.last_update == clock.now


def test_hold_boundary_is_exclusive() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    tracker.update(5.0)
    clock.advance(3.0)
    assert tracker.update(3.0) == 5.0


def test_new_peak_replaces_immediately() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    tracker.update(5.0)
    clock.advance(0.25)
    assert tracker.update(9.0) == 9.0


def test_none_never_mutates_state() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    assert tracker.update(None) is None
    tracker.update(4.0)
    stamp = tracker.last_update
    clock.advance(10.0)
    assert tracker.update(None) == 4.0
    assert tracker.current == 4.0
    assert tracker.last_update == stamp


def test_equal_value_does_not_extend_hold() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    tracker.update(5.0)
    stamp = tracker.last_update
    clock.advance(2.0)
    tracker.update(5.0)
    assert tracker.last_update == stamp
    clock.advance(1.5)
    # 3.5 s since the last strict increase: the plateau does not defer decay.
    assert tracker.update(4.0) == 4.0


def test_monotonic_within_hold_window() -> None:
    clock = FakeClock()
    tracker = PeakTracker(3.0, clock=clock)
    shown = []
    for value in [1.0, 4.0, 2.0, 3.5, 6.0, 0.5, 5.9]:
        shown.append(tracker.update(value))
        clock.advance(0.25)
    assert shown == sorted(shown)


def test_negative_hold_rejected() -> None:
    with pytest.raises(ValueError):
        PeakTracker(-1.0)


def test_reset_clears_value() -> None:
    tracker = PeakTracker()
    tracker.update(10.0)
    tracker.reset()
    assert tracker.current is None
    assert tracker.update(1.0) == 1.0


def test_peak_bank_tracks_channels_independently() -> None:
    clock = FakeClock()
    bank = PeakBank(hold_seconds=3.0, clock=clock)
    assert bank.channels == PEAK_CHANNELS
    bank.update("forward_power", 1000.0)
    bank.update("swr", 1.5)
    clock.advance(1.0)
    assert bank.update("forward_power", 200.0) == 1000.0
    assert bank.update("swr", 1.2) == 1.5
    assert bank.get("gain") is None


def test_peak_bank_rejects_unknown_channel() -> None:
    bank = PeakBank()
    with pytest.raises(KeyError):
        bank.update("bogus", 1.0)
