#!/usr/bin/env python3
"""
Console monitor: poll the amplifier page in headless Chromium and log readings.

Examples
--------
Stream readings until Ctrl+C::

    python -m ampmon.tools.headless --url http://192.168.1.68/

Print one JSON snapshot and exit::

    python -m ampmon.tools.headless --once

Press a front-panel button (power off needs ``--yes``)::

    python -m ampmon.tools.headless --click tune
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from typing import Optional

from ..config.app_config import load_settings
from ..config.runtime import load_config_or_default
from ..core.pipeline_wiring import build_pipeline
from ..core.poll_loop import PollResult
from ..core.view_model import DashboardView
from ..remote.control_actuator import ControlAction, OutcomeKind
from ..remote.playwright_surface import PlaywrightSurface

logger = logging.getLogger("ampmon.headless")

_CLICK_CHOICES = {action.value: action for action in ControlAction}


def format_view_line(view: DashboardView) -> str:
    """One log line summarising the dashboard."""
    parts = [
        f"FWD {view.forward_power or '-'}",
        f"REF {view.reflected_power or '-'}",
        f"SWR {view.swr or '-'}{' !' if view.swr_alert else ''}",
        f"Gain {view.gain or '-'}",
        f"In {view.input_power or '-'}",
        f"T {view.temperature or '-'}",
        f"{view.mode or '?'}",
        view.cat,
    ]
    if view.remote:
        parts.append(view.remote)
    return " | ".join(parts)


class LinePublisher:
    """Log the dashboard whenever the formatted view changes."""

    def __init__(self) -> None:
        self._last: Optional[str] = None

    def __call__(self, result: PollResult) -> None:
        line = format_view_line(result.view)
        if line != self._last:
            logger.info("%s", line)
            self._last = line


async def _confirm_from_flag(allowed: bool) -> bool:
    if not allowed:
        logger.warning("Refusing to power off without --yes")
    return allowed


async def _run(args: argparse.Namespace) -> int:
    settings = load_settings()
    url = args.url or settings.amplifier_url
    monitor_cfg = load_config_or_default(args.config)

    async with PlaywrightSurface(url, headless=not args.headed) as surface:
        handles = build_pipeline(
            surface,
            monitor_cfg,
            publish=LinePublisher(),
            confirm=lambda _msg: _confirm_from_flag(args.yes),
            notify=lambda msg: logger.error("%s", msg),
            on_buttons=lambda state: logger.info("Buttons: %s", state),
        )

        if args.click:
            # Captions must be known before a power toggle can be confirmed.
            await handles.reconciler.reconcile()
            outcome = await handles.actuator.invoke(_CLICK_CHOICES[args.click])
            logger.info("Outcome: %s %s", outcome.kind.value, outcome.label or outcome.message)
            return 0 if outcome.kind is OutcomeKind.CLICKED else 1

        if args.once:
            result = await handles.poll_loop.poll_once()
            if result is None:
                logger.error("No sample (%s)", handles.poll_loop.stats.last_error or "empty page")
                return 1
            payload = {
                "snapshot": dataclasses.asdict(result.snapshot),
                "view": dataclasses.asdict(result.view),
                "buttons": dataclasses.asdict(handles.reconciler.current),
            }
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return 0

        try:
            await handles.poll_loop.run(max_cycles=args.cycles)
        finally:
            logger.info("Final stats: %s", handles.poll_loop.stats.summary())
    return 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AmpMon headless monitor")
    parser.add_argument("--url", help="Amplifier base URL (default: from settings.json)")
    parser.add_argument("--config", help="Optional YAML file with monitor tuning knobs")
    parser.add_argument("--once", action="store_true", help="Print one JSON snapshot and exit")
    parser.add_argument("--cycles", type=int, default=None, help="Stop after N poll cycles")
    parser.add_argument(
        "--click",
        choices=sorted(_CLICK_CHOICES),
        help="Press a control button on the amplifier page and exit",
    )
    parser.add_argument("--yes", action="store_true", help="Confirm powering the amplifier off")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
