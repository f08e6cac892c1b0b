from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from ..exceptions import ApiError, RequestTimeoutError, TransportError

TIMEOUT_MESSAGE = "Request timed out, please try again"

_STATUS_MESSAGES: dict[int, str] = {
    400: "The submitted data is invalid",
    401: "You need to sign in to perform this action",
    403: "You do not have permission to perform this action",
    404: "The requested resource was not found",
    409: "The data already exists",
    422: "The submitted data is invalid",
    500: "Server error, please try again later",
}


def _message_from_payload(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        return payload.strip() or None
    if not isinstance(payload, Mapping):
        return None
    message = payload.get("message") or payload.get("error") or payload.get("msg")
    if isinstance(message, str):
        return message
    if isinstance(message, list):
        lines = [str(item) for item in message if item]
        if lines:
            return "Invalid data:\n" + "\n".join(lines)
    if isinstance(message, Mapping):
        nested = message.get("message")
        if isinstance(nested, str):
            return nested
    return None


def extract_error_message(
    error: BaseException,
    fallback: str,
    status_messages: Optional[Mapping[int, str]] = None,
) -> str:
    """Turn any failure raised below a store action into a display message.

    Backend messages win over per-feature status messages, which win over the
    generic status table. Server errors (5xx) never leak backend internals.
    """
    if isinstance(error, ApiError):
        if error.status < 500:
            payload_message = _message_from_payload(error.payload)
            if payload_message:
                return payload_message
        if status_messages and error.status in status_messages:
            return status_messages[error.status]
        if error.status >= 500:
            return _STATUS_MESSAGES[500]
        return _STATUS_MESSAGES.get(error.status, fallback)
    if isinstance(error, (RequestTimeoutError, httpx.TimeoutException)):
        return TIMEOUT_MESSAGE
    if isinstance(error, (TransportError, httpx.TransportError)):
        return fallback
    return str(error) or fallback


__all__ = ["extract_error_message", "TIMEOUT_MESSAGE"]
