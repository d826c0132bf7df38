"""Chart endpoints of the server.

All functions accept a :class:`~chartdeck.api.client.ChartsClient` as their
first argument, raise :class:`~chartdeck.api.client.SessionExpiredError` on
401/403 and :class:`~chartdeck.api.client.ChartsHTTPError` on any other
failure status.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ..models.chart import CatalogPage, Chart, ChartStatus
from ..submission.payload import ChartPayload
from .client import ChartsClient, parse_json, raise_for_api_status
from .normalize import normalize_chart

LIST_PATH = "/api/charts"
UPLOAD_PATH = "/api/charts/upload/"


async def list_charts(client: ChartsClient, page: int = 0) -> CatalogPage:
    """Fetch one page of the user's charts, every status, advanced detail.

    The envelope has no dedicated total; the total is read from the first
    item's ``total_count`` and is therefore 0 for an empty page.  Records
    that fail to normalize are logged and skipped.
    """
    resp = await client.get(
        LIST_PATH,
        params={"page": page, "type": "advanced", "status": "ALL"},
    )
    raise_for_api_status(resp)
    data = parse_json(resp)
    if not isinstance(data, dict):
        data = {}

    base = data.get("asset_base_url") or client.asset_base_url
    raw_items = data.get("data")
    if not isinstance(raw_items, list):
        raw_items = []

    items: list[Chart] = []
    for raw in raw_items:
        try:
            items.append(normalize_chart(raw, base))
        except Exception as exc:
            chart_id = raw.get("id", "<unknown>") if isinstance(raw, dict) else "<unknown>"
            logger.warning(f"Failed to parse chart {chart_id}: {exc}")

    total_count = 0
    if raw_items and isinstance(raw_items[0], dict):
        total_count = raw_items[0].get("total_count") or 0

    return CatalogPage(
        items=items,
        page_count=data.get("pageCount") or 0,
        total_count=total_count,
        current_page=page,
    )


async def upload_chart(client: ChartsClient, payload: ChartPayload) -> Any:
    """Create a chart from a multi-part *payload*."""
    resp = await client.post(UPLOAD_PATH, files=payload.multipart())
    raise_for_api_status(resp, "Upload")
    return parse_json(resp)


async def edit_chart(client: ChartsClient, chart_id: str, payload: ChartPayload) -> Any:
    """Patch chart *chart_id* with a multi-part *payload*."""
    resp = await client.patch(f"/api/charts/{chart_id}/edit/", files=payload.multipart())
    raise_for_api_status(resp, "Edit")
    return parse_json(resp)


async def delete_chart(client: ChartsClient, chart_id: str) -> Any:
    """Delete chart *chart_id*."""
    resp = await client.delete(f"/api/charts/{chart_id}/delete/")
    raise_for_api_status(resp, "Deletion")
    return parse_json(resp)


async def set_visibility(client: ChartsClient, chart_id: str, status: ChartStatus) -> Any:
    """Change the visibility of chart *chart_id* to *status*."""
    resp = await client.patch(
        f"/api/charts/{chart_id}/visibility/",
        json={"status": status},
    )
    raise_for_api_status(resp, "Visibility change")
    return parse_json(resp)
