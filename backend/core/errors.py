"""core/errors.py — Exception hierarchy shared by the client, services and API.

Every failure the portal can surface to a user is one of these. The handlers
registered in api/main.py turn them into the structured JSON error body:

    {"error": "...", "status_code": 401, "request_id": "...", "redirect": "/login"}

Upstream HTTP failures keep the upstream status so call sites can branch on
it (404 → onboarding / empty state, 401/403 → forced logout).
"""

from __future__ import annotations

from typing import Optional

CONNECTION_MESSAGE = "Unable to connect to server. Please check your internet connection."


class PortalError(Exception):
    """Base class; carries the message shown to the user and the HTTP status."""

    status_code = 500
    redirect: Optional[str] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UpstreamError(PortalError):
    """The upstream API answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str, path: str = ""):
        super().__init__(message, status_code)
        self.path = path

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_calendar_call(self) -> bool:
        # Calendar endpoints answer 403 for plain permission problems and
        # must not end the session.
        return "/match-calendars" in self.path


class UpstreamUnavailable(PortalError):
    """No HTTP response at all: connection refused, DNS failure, timeout."""

    status_code = 502

    def __init__(self, message: str = CONNECTION_MESSAGE):
        super().__init__(message)


class AuthenticationError(PortalError):
    """Login failed or the bearer token could not be interpreted."""

    status_code = 401


class SessionExpired(PortalError):
    """No usable portal session; the caller must log in again."""

    status_code = 401
    redirect = "/login"

    def __init__(self, message: str = "Authentication required. Please log in again."):
        super().__init__(message)


class AccessDenied(PortalError):
    """The session's role may not use this view or operation."""

    status_code = 403
    redirect = "/"

    def __init__(self, message: str = "You do not have access to this page"):
        super().__init__(message)


class ValidationFailed(PortalError):
    """Form-level validation that a single field schema cannot express."""

    status_code = 422


def display_message(exc: Exception, fallback: str) -> str:
    """Pick the message to show for a failed operation.

    Upstream and portal errors already carry a user-facing message; anything
    else gets the per-operation fallback.
    """
    if isinstance(exc, PortalError) and exc.message:
        return exc.message
    return fallback
