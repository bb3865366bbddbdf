"""Core telemetry pipeline: typed snapshots, peak hold, and the poll loop.

Nothing in this package touches Qt or a browser; the page is reached only
through the sample/button sources handed to :class:`PollLoop`.
"""

from .peak import PEAK_CHANNELS, PeakBank, PeakTracker
from .pipeline_wiring import PipelineHandles, build_pipeline
from .poll_loop import PollLoop, PollResult, PollStats
from .snapshot import (
    AmpSnapshot,
    BandInfo,
    Dashboard,
    Indicators,
    TunerInfo,
    parse_number,
    to_snapshot,
)
from .view_model import (
    SWR_NOMINAL_COLOR,
    SWR_WARNING_COLOR,
    DashboardView,
    build_view,
    swr_color,
)

__all__ = [
    "PEAK_CHANNELS",
    "PeakBank",
    "PeakTracker",
    "PipelineHandles",
    "build_pipeline",
    "PollLoop",
    "PollResult",
    "PollStats",
    "AmpSnapshot",
    "BandInfo",
    "Dashboard",
    "Indicators",
    "TunerInfo",
    "parse_number",
    "to_snapshot",
    "SWR_NOMINAL_COLOR",
    "SWR_WARNING_COLOR",
    "DashboardView",
    "build_view",
    "swr_color",
]
