"""The session gate consumed by the dashboard controller.

The controller never derives or refreshes a session.  It only asks whether
the environment is ready, whether the session is still valid, reads the
token, and reports that the server rejected it.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from pathlib import Path
from typing import Protocol

from loguru import logger

from .models.session import SessionToken
from .storage.paths import TOKEN_FILE
from .storage.tokens import TokenStore


class MissingTokenError(Exception):
    """Raised when a request needs a session token and none is available."""


class SessionGate(Protocol):
    def is_ready(self) -> bool: ...

    def is_valid(self) -> bool: ...

    def invalidate(self) -> None: ...

    def token(self) -> str | None: ...


def jwt_expiry(token: str) -> float | None:
    """Return the ``exp`` claim of a JWT as a timestamp, signature unchecked.

    Anything that is not a three-segment token with a JSON object payload
    has no expiry and gives ``None``, as does a payload without ``exp``.
    A present but non-numeric ``exp`` gives ``0.0`` so it reads as expired.
    """
    segments = token.split(".")
    if len(segments) != 3:
        return None
    body = segments[1] + "=" * (-len(segments[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(body))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    if not isinstance(claims, dict) or "exp" not in claims:
        return None
    try:
        return float(claims["exp"])
    except (TypeError, ValueError):
        return 0.0


class StoredSession:
    """Session gate backed by the token file in the config directory.

    The gate is not ready until :meth:`load` has run.  Opaque tokens are
    valid for as long as they exist; JWTs carrying an ``exp`` claim expire
    30 seconds early so a request never races the expiry.

    Example::

        session = StoredSession().load()
        if session.is_valid():
            ...
    """

    EXPIRY_MARGIN = 30

    def __init__(self, path: Path = TOKEN_FILE) -> None:
        self._store = TokenStore(path)
        self._token: SessionToken | None = None
        self._ready = False

    def load(self) -> StoredSession:
        self._token = self._store.read()
        self._ready = True
        return self

    def is_ready(self) -> bool:
        return self._ready

    def is_valid(self) -> bool:
        if self._token is None or not self._token.token:
            return False
        expiry = jwt_expiry(self._token.token)
        return expiry is None or time.time() < expiry - self.EXPIRY_MARGIN

    def token(self) -> str | None:
        if self._token is None:
            return None
        return self._token.token or None

    @property
    def username(self) -> str | None:
        return self._token.username if self._token else None

    def set_token(self, token: SessionToken) -> None:
        """Store *token* in memory and persist it."""
        self._token = token
        self._ready = True
        self._store.write(token)

    def invalidate(self) -> None:
        """Forget the token in memory and on disk."""
        if self._token is not None:
            logger.warning("Session invalidated, clearing stored token")
        self._token = None
        self._store.clear()
