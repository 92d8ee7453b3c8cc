"""Domain errors raised by the call services and translated by the API routers."""

from typing import Any, Optional


class CallServiceError(Exception):
    """Base class for call service errors."""


class InvalidArgument(CallServiceError, ValueError):
    """Raised when caller input is unusable (empty number, empty campaign)."""


class NotFound(CallServiceError, LookupError):
    """Raised when no call record exists for the requested id."""

    def __init__(self, call_id: str):
        self.call_id = call_id
        super().__init__(f"Call not found: {call_id}")


class DuplicateId(CallServiceError):
    """Raised when a record with the same provider id is already stored."""

    def __init__(self, call_id: str):
        self.call_id = call_id
        super().__init__(f"Call already stored: {call_id}")


class UpstreamError(CallServiceError):
    """Raised when the call provider rejects a request or cannot be reached.

    ``payload`` holds whatever the provider sent back (decoded JSON when
    possible, raw text otherwise) so it can be relayed to the caller.
    """

    def __init__(self, message: str, payload: Any = None, status_code: Optional[int] = None):
        self.payload = payload
        self.status_code = status_code
        super().__init__(message)
