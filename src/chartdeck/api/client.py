"""Base async HTTP client for the chart server."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from ..config import Settings
from ..session import MissingTokenError, SessionGate


class ChartsAPIError(Exception):
    """Base class for errors reported by the chart server."""


class SessionExpiredError(ChartsAPIError):
    """Raised when the server answers 401 or 403."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Session rejected by server ({status_code})")
        self.status_code = status_code


class ChartsHTTPError(ChartsAPIError):
    """Raised for any other non-2xx response.

    *action* names the failed operation (``"Upload"``, ``"Edit"``...).
    Without an action the message is the bare ``Network error: <status>``
    used for listing failures.
    """

    def __init__(self, status_code: int, body: str = "", action: str | None = None) -> None:
        if action:
            message = f"{action} failed: {status_code} - {body}"
        else:
            message = f"Network error: {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.action = action


AUTH_FAILURE_CODES = (401, 403)


def raise_for_api_status(resp: httpx.Response, action: str | None = None) -> None:
    """Classify a response, raising on anything but 2xx.

    401 and 403 always map to :class:`SessionExpiredError`, never to the
    generic :class:`ChartsHTTPError`.
    """
    if resp.is_success:
        return
    if resp.status_code in AUTH_FAILURE_CODES:
        raise SessionExpiredError(resp.status_code)
    raise ChartsHTTPError(resp.status_code, resp.text, action)


def parse_json(resp: httpx.Response) -> Any:
    """Parse a 2xx response body; an empty body parses as ``{}``."""
    if not resp.content:
        return {}
    return resp.json()


class ChartsClient:
    """Thin async wrapper around :class:`httpx.AsyncClient`.

    Every request reads the current token from the session gate and sends it
    verbatim in the ``Authorization`` header; the server expects no scheme
    prefix.

    Example::

        async with ChartsClient(settings, session) as client:
            resp = await client.get("/api/charts", params={"page": 0})
    """

    def __init__(
        self,
        settings: Settings,
        session: SessionGate,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=settings.api_url.rstrip("/"),
            timeout=settings.timeout,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        token = self.session.token()
        if not token:
            raise MissingTokenError("No session token available")
        return {"Authorization": token}

    @property
    def asset_base_url(self) -> str:
        return self.settings.default_asset_base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Authenticated HTTP verbs (relative to settings.api_url)
    # ------------------------------------------------------------------

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {**kwargs.pop("headers", {}), **self._auth_headers()}
        resp = await self._http.request(method, path, headers=headers, **kwargs)
        logger.debug(f"{method} {path} -> {resp.status_code}")
        return resp

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying HTTP transport."""
        await self._http.aclose()

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def __aenter__(self) -> ChartsClient:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
