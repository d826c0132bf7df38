"""The session token file.

A :class:`TokenStore` owns one JSON document holding a
:class:`SessionToken`.  An unreadable document is treated as no token at
all, so a damaged file costs the user a fresh ``login`` and nothing else.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ..models.session import SessionToken
from .paths import TOKEN_FILE, atomic_write


class TokenStore:
    """Reads, writes and clears the token document at *path*."""

    def __init__(self, path: Path = TOKEN_FILE) -> None:
        self.path = path

    def read(self) -> SessionToken | None:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning(f"Cannot read token file {self.path}: {exc}")
            return None
        try:
            return SessionToken.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Ignoring malformed token file {self.path}: {exc.error_count()} error(s)")
            return None

    def write(self, token: SessionToken) -> None:
        atomic_write(self.path, token.model_dump_json(indent=2))
        logger.debug(f"Token for {token.username or 'anonymous'} written to {self.path}")

    def clear(self) -> bool:
        """Delete the token document; returns whether one was removed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error(f"Cannot remove token file {self.path}: {exc}")
            return False
        logger.debug(f"Token file {self.path} removed")
        return True
