"""Turn raw chart records from the API into canonical :class:`Chart` models."""

from __future__ import annotations

from typing import Any

from ..models.chart import Chart


def split_tags(raw: Any) -> list[str]:
    """Split a comma separated tag string, trimming and dropping empties.

    Lists are accepted too (the listing endpoint returns tags either way).
    """
    if not raw:
        return []
    parts = raw if isinstance(raw, list) else str(raw).split(",")
    return [tag for tag in (str(part).strip() for part in parts) if tag]


def asset_url(base: str, author_id: Any, chart_id: Any, file_hash: Any) -> str:
    """Return ``base/author_id/chart_id/file_hash``, or ``""`` without a hash."""
    if not file_hash:
        return ""
    return f"{base.rstrip('/')}/{author_id}/{chart_id}/{file_hash}"


def normalize_chart(raw: dict[str, Any], asset_base_url: str) -> Chart:
    """Build a :class:`Chart` from one raw listing record.

    ``author_field`` is taken from ``chart_design`` rather than
    ``author_full`` so that an edit re-submits the plain charter name and not
    the formatted ``name#handle`` string.  The background URL falls back to
    ``background_v3_file_hash`` when the primary hash is missing; ``has_bg``
    only reflects the primary.

    The input dict is not modified.
    """
    chart_id = raw.get("id")
    author_id = raw.get("author") or ""

    def url(field: str) -> str:
        return asset_url(asset_base_url, author_id, chart_id, raw.get(field))

    background_url = url("background_file_hash") or url("background_v3_file_hash")

    data: dict[str, Any] = {
        "id": str(chart_id),
        "title": raw.get("title") or "",
        "artists": raw.get("artists") or "",
        "author": raw.get("author_full") or "",
        "author_field": raw.get("chart_design") or "",
        "author_id": str(author_id),
        "rating": raw.get("rating"),
        "description": raw.get("description") or "",
        "tags": split_tags(raw.get("tags")),
        "cover_url": url("jacket_file_hash"),
        "bgm_url": url("music_file_hash"),
        "chart_url": url("chart_file_hash"),
        "preview_url": url("preview_file_hash"),
        "background_url": background_url,
        "has_bg": bool(raw.get("background_file_hash")),
        "like_count": raw.get("like_count") or 0,
        "created_at": _text_or_none(raw.get("created_at")),
        "updated_at": _text_or_none(raw.get("updated_at")),
    }
    if raw.get("status"):
        data["status"] = raw["status"]
    return Chart(**data)


def _text_or_none(value: Any) -> str | None:
    return None if value is None else str(value)
