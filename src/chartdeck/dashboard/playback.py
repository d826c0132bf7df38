"""Preview playback bookkeeping.

The registry does not play audio itself; it hands out one
:class:`PlaybackHandle` per chart and guarantees at most one of them is
active at a time.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger


@dataclass
class PlaybackHandle:
    chart_id: str
    url: str
    position: float = 0.0
    active: bool = False

    def start(self) -> None:
        self.active = True

    def stop(self) -> None:
        """Stop and rewind."""
        self.active = False
        self.position = 0.0


class PlaybackRegistry:
    """Map of chart id -> playback handle with a single active entry."""

    def __init__(self) -> None:
        self._handles: dict[str, PlaybackHandle] = {}
        self._active: str | None = None

    @property
    def active(self) -> str | None:
        """Chart id of the active handle, or ``None``."""
        return self._active

    def get(self, chart_id: str) -> PlaybackHandle | None:
        return self._handles.get(chart_id)

    def acquire(self, chart_id: str, url: str) -> PlaybackHandle:
        """Start playback of *chart_id*, stopping whatever else was playing."""
        if self._active is not None and self._active != chart_id:
            self.release(self._active)
        handle = self._handles.get(chart_id)
        if handle is None or handle.url != url:
            handle = PlaybackHandle(chart_id=chart_id, url=url)
            self._handles[chart_id] = handle
        handle.start()
        self._active = chart_id
        logger.debug(f"Playing preview for chart {chart_id}")
        return handle

    def release(self, chart_id: str) -> None:
        """Stop *chart_id* if it is the active handle."""
        if self._active != chart_id:
            return
        handle = self._handles.get(chart_id)
        if handle is not None:
            handle.stop()
        self._active = None

    def clear(self) -> None:
        """Stop everything and forget all handles."""
        if self._active is not None:
            self.release(self._active)
        self._handles.clear()
