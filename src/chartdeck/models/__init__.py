"""Re-export all chartdeck data models for convenient access."""

from chartdeck.models.chart import (
    STATUS_CYCLE,
    CatalogPage,
    Chart,
    ChartStatus,
    next_status,
)
from chartdeck.models.session import SessionToken
from chartdeck.models.submission import (
    ChartFile,
    ChartPatch,
    EditTarget,
    PendingSubmission,
    SubmissionMode,
)

__all__ = [
    # Chart models
    "STATUS_CYCLE",
    "CatalogPage",
    "Chart",
    "ChartStatus",
    "next_status",
    # Submission models
    "ChartFile",
    "ChartPatch",
    "EditTarget",
    "PendingSubmission",
    "SubmissionMode",
    # Session models
    "SessionToken",
]
