"""Models for pending create/update submissions and their request bodies."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

SubmissionMode = Literal["create", "update"]


class ChartFile(BaseModel):
    """A file attached to a submission, held in memory."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str
    content: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> ChartFile:
        """Read *path* from disk, guessing the content type from its name."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type,
        )

    def as_httpx_file(self) -> tuple[str, bytes, str]:
        return (
            self.filename,
            self.content,
            self.content_type or "application/octet-stream",
        )


class EditTarget(BaseModel):
    """The chart being edited and its current asset URLs (display only)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    jacket_url: str = ""
    bgm_url: str = ""
    chart_url: str = ""
    preview_url: str = ""
    background_url: str = ""


class PendingSubmission(BaseModel):
    """User input for a create or update, exactly as entered.

    ``rating`` and ``tags`` stay raw text until validation; the validator
    parses them.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    mode: SubmissionMode = "create"
    title: str = ""
    artists: str = ""
    author: str = ""
    rating: str = ""
    description: str = ""
    tags: str = ""

    jacket: ChartFile | None = None
    bgm: ChartFile | None = None
    chart: ChartFile | None = None
    preview: ChartFile | None = None
    background: ChartFile | None = None

    target: EditTarget | None = None


class ChartPatch(BaseModel):
    """Metadata document sent in the ``data`` part of a chart submission.

    Fields that were never assigned are absent from the serialized JSON, so
    an edit that leaves ``rating`` alone does not send ``rating`` and the
    server keeps its value.  ``None`` is never used to mean "absent".
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    artists: str | None = None
    author: str | None = None
    rating: int | None = None
    description: str | None = None
    tags: list[str] | None = None

    includes_jacket: bool | None = None
    includes_audio: bool | None = None
    includes_chart: bool | None = None
    includes_preview: bool | None = None
    includes_background: bool | None = None
    delete_background: bool | None = None
    delete_preview: bool | None = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_unset=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_unset=True)
