"""Exceptions raised by the Gyazo clients."""

from __future__ import annotations


class GyazoError(Exception):
    """Base class for errors reported by this package."""
    pass


class MalformedResponseError(GyazoError):
    """Raised when a response body does not match the expected shape."""

    def __init__(self, detail: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.body = body


class GyazoAPIError(GyazoError):
    """Raised when the service reports an error message."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OAuth2Error(GyazoError):
    """Raised when the authorization code cannot be exchanged for a token."""
    pass
