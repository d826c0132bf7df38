"""Client-side validation and request body construction for submissions."""

from chartdeck.submission.payload import FILE_FIELDS, ChartPayload, build_payload
from chartdeck.submission.validator import ValidationResult, validate_submission

__all__ = [
    "FILE_FIELDS",
    "ChartPayload",
    "ValidationResult",
    "build_payload",
    "validate_submission",
]
