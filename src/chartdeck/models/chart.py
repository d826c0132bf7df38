"""Pydantic v2 models for charts and catalog pages."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

ChartStatus = Literal["PRIVATE", "PUBLIC", "UNLISTED"]

STATUS_CYCLE: tuple[ChartStatus, ...] = ("PRIVATE", "PUBLIC", "UNLISTED")


def next_status(status: str | None) -> ChartStatus:
    """Return the status following *status* in PRIVATE -> PUBLIC -> UNLISTED.

    Unknown or missing statuses restart the cycle at ``PRIVATE``.
    """
    if status not in STATUS_CYCLE:
        return "PRIVATE"
    return STATUS_CYCLE[(STATUS_CYCLE.index(status) + 1) % len(STATUS_CYCLE)]


class Chart(BaseModel):
    """Canonical, normalized representation of one chart.

    ``author`` is the formatted display name.  ``author_field`` is the raw
    charter name as typed by the uploader and is what gets re-submitted on
    edit; it is never shown as display text.  ``author_id`` is the owner id
    used in asset paths.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    artists: str = ""
    author: str = ""
    author_field: str = ""
    author_id: str = ""
    rating: int | float | None = None
    description: str = ""
    tags: list[str] = []

    cover_url: str = ""
    bgm_url: str = ""
    chart_url: str = ""
    preview_url: str = ""
    background_url: str = ""
    has_bg: bool = False

    like_count: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    status: ChartStatus = "PRIVATE"


class CatalogPage(BaseModel):
    """One page of the user's charts plus pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[Chart] = []
    page_count: int = 0
    total_count: int = 0
    current_page: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, chart_id: str) -> Chart | None:
        """Return the chart with *chart_id* on this page, or ``None``."""
        for chart in self.items:
            if chart.id == chart_id:
                return chart
        return None
