"""Runtime settings.

Settings come from ``settings.json`` in the platform config directory and
are overridden by ``CHARTDECK_*`` environment variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .storage.paths import SETTINGS_FILE, atomic_write

ENV_PREFIX = "CHARTDECK_"


class Settings(BaseModel):
    """Connection settings for the chart server."""

    model_config = ConfigDict(populate_by_name=True)

    api_url: str = "http://localhost:8000"
    # Used when a listing response carries no ``asset_base_url``.
    asset_base_url: str | None = None
    timeout: float = 30.0

    @property
    def default_asset_base_url(self) -> str:
        return self.asset_base_url or self.api_url


def load_settings(path: Path = SETTINGS_FILE) -> Settings:
    """Load settings from *path*, then apply environment overrides.

    A missing or unreadable file yields the defaults.
    """
    data: dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except Exception as exc:
            logger.warning(f"Ignoring unreadable settings file {path}: {exc}")
            data = {}

    for field in Settings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value:
            data[field] = value

    return Settings(**data)


def save_settings(settings: Settings, path: Path = SETTINGS_FILE) -> None:
    """Persist *settings* to *path*."""
    atomic_write(path, settings.model_dump_json(indent=2, exclude_none=True))
    logger.debug(f"Settings saved to {path}")
