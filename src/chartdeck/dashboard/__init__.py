"""Dashboard controller: catalog synchronization and the mutation pipeline."""

from chartdeck.dashboard.controller import DashboardController
from chartdeck.dashboard.playback import PlaybackHandle, PlaybackRegistry
from chartdeck.dashboard.state import DashboardState, PipelinePhase

__all__ = [
    "DashboardController",
    "DashboardState",
    "PipelinePhase",
    "PlaybackHandle",
    "PlaybackRegistry",
]
