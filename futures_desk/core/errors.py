"""Error taxonomy for the futures REST client.

Every failure the client surfaces is one of these. Exchange codes and
messages are carried verbatim so callers can branch on them.
"""

from __future__ import annotations

from typing import Any, Optional

# Codes worth retrying after a pause (clock drift, request weight, rate limit)
_RETRY_CODES = {-1021, -1003, -1015}
# Key/permission/signature problems: log in again instead of retrying
_AUTH_CODES = {-2014, -2015, -1022, -1002}
_RETRY_STATUSES = {418, 429}
_AUTH_STATUSES = {401, 403}


class FuturesDeskError(Exception):
    """Base class for everything the client raises."""


class UnauthenticatedError(FuturesDeskError):
    """A signed call was attempted with no credentials stored."""

    def __init__(self, message: str = "API credentials not set") -> None:
        super().__init__(message)


class TransportError(FuturesDeskError):
    """Network, DNS, connection failure or an undecodable response body."""


class RequestTimeoutError(TransportError):
    """The transport-level timeout elapsed before a response arrived."""


class ExchangeRejectionError(FuturesDeskError):
    """Non-2xx reply. ``code``/``msg`` are the exchange's own."""

    def __init__(self, status_code: int, code: Optional[int], msg: str, payload: Any = None) -> None:
        self.status_code = status_code
        self.code = code
        self.msg = msg
        self.payload = payload
        super().__init__(f"HTTP {status_code} code={code} msg={msg}")


class ValidationError(FuturesDeskError, ValueError):
    """Local pre-flight rejection; nothing was sent."""


def classify(exc: BaseException) -> str:
    """
    Returns one of: "retry" | "auth" | "business" | "other".

    The client itself never retries; this only tells callers what kind of
    failure they are looking at.
    """
    if isinstance(exc, UnauthenticatedError):
        return "auth"
    if isinstance(exc, TransportError):
        return "retry"
    if isinstance(exc, ExchangeRejectionError):
        if exc.code in _AUTH_CODES or exc.status_code in _AUTH_STATUSES:
            return "auth"
        if exc.code in _RETRY_CODES or exc.status_code in _RETRY_STATUSES or exc.status_code >= 500:
            return "retry"
        return "business"
    return "other"
