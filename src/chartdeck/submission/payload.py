"""Build multi-part request bodies for chart uploads and edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..models.submission import ChartFile, ChartPatch, PendingSubmission, SubmissionMode
from .validator import parse_rating

DATA_FIELD = "data"

# Submission attribute -> multi-part field name, in send order.
FILE_FIELDS: dict[str, str] = {
    "jacket": "jacket_image",
    "bgm": "audio_file",
    "chart": "chart_file",
    "preview": "preview_file",
    "background": "background_image",
}

REQUIRED_FILES = ("jacket", "chart", "bgm")


@dataclass
class ChartPayload:
    """A metadata document plus the files that go with it."""

    data: ChartPatch
    files: dict[str, ChartFile] = field(default_factory=dict)

    def multipart(self) -> list[tuple[str, tuple[Any, ...]]]:
        """Return the body as an ``httpx`` ``files=`` list.

        The metadata is the ``data`` part, sent as a plain form field (no
        filename), so the request is multi-part even when no file is
        attached.
        """
        parts: list[tuple[str, tuple[Any, ...]]] = [(DATA_FIELD, (None, self.data.to_json()))]
        for name, chart_file in self.files.items():
            parts.append((name, chart_file.as_httpx_file()))
        return parts


def build_payload(
    submission: PendingSubmission,
    tags: list[str],
    mode: SubmissionMode | None = None,
    rating: int | None = None,
) -> ChartPayload:
    """Turn a validated *submission* into a :class:`ChartPayload`.

    *tags* and *rating* are the values parsed by the validator; when
    *rating* is not given it is parsed from the submission text.  Only
    fields that carry a value are set on the patch.
    """
    mode = mode or submission.mode
    if rating is None and submission.rating:
        rating = parse_rating(submission.rating)

    if mode == "create":
        return _build_create(submission, tags, rating)
    return _build_update(submission, tags, rating)


def _build_create(submission: PendingSubmission, tags: list[str], rating: int | None) -> ChartPayload:
    fields: dict[str, Any] = {
        "rating": rating,
        "title": submission.title,
        "artists": submission.artists,
        "author": submission.author,
        "tags": tags,
        "includes_background": submission.background is not None,
        "includes_preview": submission.preview is not None,
    }
    if submission.description:
        fields["description"] = submission.description

    files: dict[str, ChartFile] = {}
    for attr, part in FILE_FIELDS.items():
        chart_file = getattr(submission, attr)
        if chart_file is not None:
            files[part] = chart_file
        elif attr in REQUIRED_FILES:
            raise ValueError(f"Missing required file: {attr}")
    return ChartPayload(data=ChartPatch(**fields), files=files)


def _build_update(submission: PendingSubmission, tags: list[str], rating: int | None) -> ChartPayload:
    fields: dict[str, Any] = {}
    for name in ("title", "artists", "author"):
        value = getattr(submission, name)
        if value:
            fields[name] = value
    if rating is not None:
        fields["rating"] = rating
    if submission.description:
        fields["description"] = submission.description
    if tags:
        fields["tags"] = tags

    fields.update(
        includes_jacket=submission.jacket is not None,
        includes_audio=submission.bgm is not None,
        includes_chart=submission.chart is not None,
        includes_preview=submission.preview is not None,
        includes_background=submission.background is not None,
        # TODO: expose delete controls once the editor can remove a background or preview.
        delete_background=False,
        delete_preview=False,
    )

    files = {
        part: getattr(submission, attr)
        for attr, part in FILE_FIELDS.items()
        if getattr(submission, attr) is not None
    }
    return ChartPayload(data=ChartPatch(**fields), files=files)
