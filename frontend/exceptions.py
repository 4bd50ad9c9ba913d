"""Errors raised while talking to the club backend."""

from typing import Any


class BackendError(Exception):
    """Base class for all backend API errors."""

    def __init__(self, message: str, status_code: int | None = None, payload: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class APIResponseError(BackendError):
    """The backend answered with an error status."""


class APIForbiddenError(APIResponseError):
    """The backend refused the request for the current member (HTTP 403)."""


class SessionExpiredError(APIResponseError):
    """The bearer token was rejected while the member was using the site."""


class APIValidationError(BackendError):
    """The backend answered with a body that could not be parsed."""


class APITimeoutError(BackendError):
    """The backend did not answer in time."""


class APIUnavailableError(BackendError):
    """The backend could not be reached."""


class BookingLimitError(APIResponseError):
    """A booking was rejected because the member has too many active sessions.

    ``sessions`` holds the conflicting reservations as reported by the
    backend, so the member can pick one to cancel.
    """

    def __init__(self, message: str, sessions: list, status_code: int | None = None, payload: dict[str, Any] | None = None):
        super().__init__(message, status_code, payload)
        self.sessions = sessions
