"""Pydantic v2 model for the persisted session token."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SessionToken(BaseModel):
    """Opaque session token as handed out by the chart server."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    username: str | None = None
