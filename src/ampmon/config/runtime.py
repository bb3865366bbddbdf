"""Runtime tuning knobs for the polling pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MonitorConfig:
    """
    Timing and page-query settings for the acquisition loop.

    The defaults match the amplifier web UI refresh: four polls per second,
    three seconds of peak hold.
    """

    poll_interval_ms: int = 250
    hold_seconds: float = 3.0
    query_timeout_s: float = 3.0
    settle_delay_s: float = 0.5
    confirm_dialog_delay_s: float = 0.1
    marker_attribute: str = "w-val"

    def sanitized(self) -> MonitorConfig:
        """Return a copy with derived limits applied."""
        marker = str(self.marker_attribute or "").strip() or "w-val"
        return MonitorConfig(
            poll_interval_ms=max(50, int(self.poll_interval_ms)),
            hold_seconds=max(0.0, float(self.hold_seconds)),
            query_timeout_s=min(30.0, max(0.5, float(self.query_timeout_s))),
            settle_delay_s=max(0.0, float(self.settle_delay_s)),
            confirm_dialog_delay_s=max(0.0, float(self.confirm_dialog_delay_s)),
            marker_attribute=marker,
        )

    @property
    def poll_interval_s(self) -> float:
        return self.poll_interval_ms / 1000.0


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`MonitorConfig`."""
    return {f.name for f in fields(MonitorConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``monitor`` block into the root mapping."""
    if "monitor" in data and isinstance(data["monitor"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "monitor":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> MonitorConfig:
    """Build :class:`MonitorConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return MonitorConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    try:
        return MonitorConfig(**payload).sanitized()
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid monitor setting: {exc}") from exc


def load_config(path: str | Path | None) -> MonitorConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`MonitorConfig`. YAML syntax
    errors and values of the wrong type raise ``ValueError``.
    """
    if path is None:
        return MonitorConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return MonitorConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed YAML in {cfg_path}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


def load_config_or_default(path: str | Path | None) -> MonitorConfig:
    """Like :func:`load_config`, but log and return defaults on any config error."""
    try:
        return load_config(path)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring monitor config %s: %s", path, exc)
        return MonitorConfig()


__all__ = ["MonitorConfig", "config_from_mapping", "load_config", "load_config_or_default"]
