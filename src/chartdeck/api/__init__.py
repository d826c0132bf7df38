"""Chart server client layer -- re-exports the client and its errors."""

from chartdeck.api.client import (
    ChartsAPIError,
    ChartsClient,
    ChartsHTTPError,
    SessionExpiredError,
)

__all__ = ["ChartsAPIError", "ChartsClient", "ChartsHTTPError", "SessionExpiredError"]
