"""Default application paths and persisted user settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .runtime import MonitorConfig

logger = logging.getLogger(__name__)

DEFAULT_AMPLIFIER_URL = "http://192.168.1.68/"
DEFAULT_CONFIG_DIR = Path("~/.config/ampmon")
SETTINGS_FILENAME = "settings.json"


@dataclass
class AppPaths:
    """
    Commonly used paths for the monitor.

    ``AMPMON_CONFIG_DIR`` overrides the default per-user configuration folder
    so that tests and portable installs can keep settings elsewhere.
    """

    config_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        env_config_dir = os.environ.get("AMPMON_CONFIG_DIR")
        if env_config_dir:
            self.config_dir = Path(env_config_dir).expanduser()
        else:
            self.config_dir = DEFAULT_CONFIG_DIR.expanduser()

    @property
    def settings_file(self) -> Path:
        return self.config_dir / SETTINGS_FILENAME

    def ensure(self) -> None:
        """Create directories if they do not yet exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class AmpSettings:
    """User settings persisted between runs (``settings.json``)."""

    amplifier_url: str = DEFAULT_AMPLIFIER_URL
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Any) -> AmpSettings:
        if not isinstance(data, dict):
            return cls()
        extra = {k: v for k, v in data.items() if k != "amplifier_url"}
        url = str(data.get("amplifier_url") or "").strip() or DEFAULT_AMPLIFIER_URL
        return cls(amplifier_url=url, extra=extra)

    def to_mapping(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["amplifier_url"] = self.amplifier_url
        return data


def save_settings(settings: AmpSettings, path: Path | None = None) -> bool:
    """
    Write *settings* as JSON.

    Returns False (after logging) instead of raising when the file cannot be
    written.
    """
    target = Path(path) if path is not None else AppPaths().settings_file
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as fh:
            json.dump(settings.to_mapping(), fh, indent=2)
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to save settings to %s: %s", target, exc)
        return False
    return True


def load_settings(path: Path | None = None) -> AmpSettings:
    """
    Load settings from *path* (default: ``AppPaths().settings_file``).

    A missing file yields the defaults, which are then saved for next time.
    Unreadable or malformed files are logged and replaced by the in-memory
    defaults; nothing is raised.
    """
    target = Path(path) if path is not None else AppPaths().settings_file
    if target.exists():
        try:
            with target.open("r", encoding="utf-8") as fh:
                return AmpSettings.from_mapping(json.load(fh))
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load settings from %s: %s", target, exc)
            return AmpSettings()

    settings = AmpSettings()
    save_settings(settings, target)
    return settings


@dataclass
class AppConfig:
    """In-memory configuration snapshot used by the GUI and headless monitor."""

    settings: AmpSettings = field(default_factory=AmpSettings)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)

    @property
    def amplifier_url(self) -> str:
        return self.settings.amplifier_url
