"""State container owned by one :class:`DashboardController`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..models.chart import CatalogPage, Chart
from ..models.submission import PendingSubmission

PipelinePhase = Literal[
    "idle",
    "validating",
    "submitting",
    "success",
    "failed",
    "session_invalid",
]


@dataclass
class DashboardState:
    """Everything the presentation layer renders.

    ``page`` and ``submission`` are only ever replaced wholesale.  ``loading``
    is advisory: the UI should disable its triggers while it is set, the
    controller does not reject overlapping calls.
    """

    page: CatalogPage = field(default_factory=CatalogPage)
    loading: bool = False
    error: str | None = None
    phase: PipelinePhase = "idle"

    editor_open: bool = False
    submission: PendingSubmission | None = None
    pending_deletion: Chart | None = None
    now_playing: str | None = None

    @property
    def editing(self) -> bool:
        return self.submission is not None and self.submission.mode == "update"
