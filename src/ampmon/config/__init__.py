"""Configuration objects and helpers for AmpMon.

Two sources feed the monitor:
- ``settings.json`` in the per-user config folder, holding the amplifier URL
  (see :mod:`app_config`)
- an optional YAML file with polling and peak-hold tuning knobs
  (see :mod:`runtime`)
"""

from .app_config import AmpSettings, AppConfig, AppPaths, load_settings, save_settings
from .runtime import MonitorConfig, config_from_mapping, load_config, load_config_or_default

__all__ = [
    "AmpSettings",
    "AppConfig",
    "AppPaths",
    "MonitorConfig",
    "config_from_mapping",
    "load_config",
    "load_config_or_default",
    "load_settings",
    "save_settings",
]
