"""
Domain Exceptions
Errors raised by services and rendered to HTTP responses by the app's exception handler
"""

from typing import Optional


class ClubError(Exception):
    """Base class for request failures that map to a client-facing status code."""

    status_code: int = 500
    detail: str = "Internal server error occurred"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class Unauthenticated(ClubError):
    status_code = 401
    detail = "Unauthorized"


class NotFound(ClubError):
    status_code = 404
    detail = "Not found"


class InvalidInput(ClubError):
    status_code = 400
    detail = "Invalid input"


class Forbidden(ClubError):
    status_code = 403
    detail = "Forbidden"


class InvalidState(ClubError):
    status_code = 400
    detail = "Invalid state for this operation"


class Conflict(ClubError):
    status_code = 409
    detail = "Conflict"


class UpstreamFailure(ClubError):
    """The data store or the chat-completion provider failed."""

    status_code = 502
    detail = "Upstream service unavailable"


class Timeout(ClubError):
    """A call to the data store or the chat-completion provider timed out."""

    status_code = 504
    detail = "Upstream service timed out"
