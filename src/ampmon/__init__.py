"""AmpMon: live telemetry from an RF amplifier's embedded web control panel."""

__version__ = "0.1.0"
