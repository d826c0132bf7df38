"""Validation of pending chart submissions.

Rules are checked in a fixed order and the first failure wins, so the user
only ever sees one message at a time:

1. create only -- every required field and file is present;
2. field lengths;
3. tag count and tag length;
4. rating parses as a whole number.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..api.normalize import split_tags
from ..models.submission import PendingSubmission, SubmissionMode

MAX_TITLE = 50
MAX_ARTISTS = 50
MAX_AUTHOR = 50
MAX_DESCRIPTION = 1000
MAX_TAGS = 3
MAX_TAG_LENGTH = 10

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields and upload all required files."

_LENGTH_LIMITS = (
    ("title", MAX_TITLE, "Title"),
    ("artists", MAX_ARTISTS, "Artists"),
    ("author", MAX_AUTHOR, "Charter Name"),
    ("description", MAX_DESCRIPTION, "Description"),
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class ValidationResult:
    """Outcome of :func:`validate_submission`.

    On success *error* is ``None`` and *tags* / *rating* hold the parsed
    values ready for the payload builder.
    """

    tags: list[str] = field(default_factory=list)
    rating: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_rating(text: str) -> int | None:
    """Parse the leading integer of *text* (``"12"``, ``" 7 "``, ``"3.5"`` -> 3).

    Returns ``None`` when *text* does not start with a number.
    """
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else None


def _missing_required(submission: PendingSubmission) -> bool:
    return not (
        submission.title
        and submission.artists
        and submission.author
        and submission.rating
        and submission.chart
        and submission.bgm
        and submission.jacket
    )


def validate_submission(
    submission: PendingSubmission,
    mode: SubmissionMode | None = None,
) -> ValidationResult:
    """Validate *submission* for *mode* (defaults to the submission's own mode)."""
    mode = mode or submission.mode

    if mode == "create" and _missing_required(submission):
        return ValidationResult(error=REQUIRED_FIELDS_MESSAGE)

    for name, limit, label in _LENGTH_LIMITS:
        value = getattr(submission, name)
        if value and len(value) > limit:
            return ValidationResult(error=f"{label} must be {limit} characters or less.")

    tags = split_tags(submission.tags)
    if len(tags) > MAX_TAGS:
        return ValidationResult(error=f"Maximum {MAX_TAGS} tags allowed.")
    for tag in tags:
        if len(tag) > MAX_TAG_LENGTH:
            return ValidationResult(
                error=f'Tag "{tag}" must be {MAX_TAG_LENGTH} characters or less.'
            )

    rating = None
    if submission.rating:
        rating = parse_rating(submission.rating)
        if rating is None:
            return ValidationResult(error="Rating must be a whole number.")

    return ValidationResult(tags=tags, rating=rating)
