from __future__ import annotations

import logging

from ampmon.core.peak import PeakBank
from ampmon.core.poll_loop import PollResult
from ampmon.core.snapshot import to_snapshot
from ampmon.core.view_model import build_view
from ampmon.tools.headless import LinePublisher, _build_arg_parser, format_view_line


def _result(raw: dict) -> PollResult:
    snapshot = to_snapshot(raw)
    return PollResult(raw=raw, snapshot=snapshot, view=build_view(snapshot, PeakBank()))


def test_format_view_line_marks_swr_alert() -> None:
    line = format_view_line(
        _result(
            {
                "values/forward_power": "900 W",
                "values/swr": "2.3",
                "switches/mode": "OPERATE",
                "indicators/last_cmd_is_remote": "RC",
            }
        ).view
    )
    assert line.startswith("FWD 900 W | REF - | SWR 2.30 !")
    assert "OPERATE" in line
    assert line.endswith("CAT OFF | RC")


def test_line_publisher_only_logs_changes(caplog) -> None:
    publish = LinePublisher()
    with caplog.at_level(logging.INFO, logger="ampmon.headless"):
        publish(_result({"values/swr": "1.2"}))
        publish(_result({"values/swr": "1.2"}))
        publish(_result({"values/swr": "1.3"}))
    assert len(caplog.records) == 2


def test_click_choices_cover_all_actions() -> None:
    args = _build_arg_parser().parse_args(["--click", "power", "--yes"])
    assert args.click == "power"
    assert args.yes is True
