"""Error taxonomy for talking to the draft service."""

from __future__ import annotations

from typing import Any, List, Optional


class MundoError(Exception):
    """Base class for all draft client errors."""


class TransportError(MundoError):
    """Network unreachable, timeout or upstream unavailable after retries.

    Recoverable: the next scheduled refresh simply tries again.
    """


class ApiError(MundoError):
    """The service answered with a non-success response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or []


class NotFoundError(ApiError):
    """The requested draft, champion or user does not exist."""


class SelectionRejectedError(ApiError):
    """The service refused a ban/pick (wrong turn, taken champion, not drafting)."""
