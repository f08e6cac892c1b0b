from __future__ import annotations

from typing import Any
from uuid import uuid4


def new_trace_id() -> str:
    return uuid4().hex


class TrackedError(Exception):
    def __init__(self, message: str, *, error_type: str, trace_id: str | None = None) -> None:
        self.error_type = error_type
        self.trace_id = trace_id or new_trace_id()
        super().__init__(message)

    def with_trace(self) -> str:
        return f"{self.args[0]} (trace_id={self.trace_id})"


class ApiError(TrackedError):
    """The backend answered with an HTTP error status."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        trace_id: str | None = None,
    ) -> None:
        self.status = status
        self.payload = payload
        super().__init__(message, error_type="http", trace_id=trace_id)


class TransportError(TrackedError):
    """No response reached the client."""

    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="transport", trace_id=trace_id)


class RequestTimeoutError(TrackedError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="timeout", trace_id=trace_id)


class PreconditionError(TrackedError):
    """A required input was missing or invalid before any request was sent."""

    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="precondition", trace_id=trace_id)


__all__ = [
    "new_trace_id",
    "TrackedError",
    "ApiError",
    "TransportError",
    "RequestTimeoutError",
    "PreconditionError",
]
