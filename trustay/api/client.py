from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Literal, Mapping, Optional, Union

import httpx

from ..config import Settings, get_settings
from ..exceptions import ApiError, PreconditionError, RequestTimeoutError, TrackedError, TransportError
from ..log import ApiCallLogger
from .errors import extract_error_message
from .result import ApiFailure, ApiResult, ApiSuccess

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]
ResponseType = Literal["json", "bytes"]


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    return value


def clean_params(params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    if not params:
        return {}
    return {key: _query_value(value) for key, value in params.items() if value is not None}


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """One authenticated request at a time, folded into ``ApiSuccess``/``ApiFailure``.

    The client never raises to its caller: HTTP, transport, timeout and
    decoding errors all come back as ``ApiFailure``. Only cancellation of
    the awaiting task propagates. There is no retry and no caching here.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout_seconds
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _resolve_token(self, token: Optional[str]) -> Optional[str]:
        if token:
            return token
        if self._token_provider is None:
            return None
        value = self._token_provider()
        if inspect.isawaitable(value):
            value = await value
        return value or None

    async def _send(
        self,
        path: str,
        method: str,
        *,
        params: Optional[Mapping[str, Any]],
        json: Any,
        token: Optional[str],
        response_type: ResponseType,
    ) -> tuple[Any, int]:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self._client.request(
                method,
                path,
                params=clean_params(params),
                json=json,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"{method} {path} timed out after {self.timeout}s") from exc
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 400:
            payload = _error_payload(response)
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status=response.status_code,
                payload=payload,
            )
        if response_type == "bytes":
            return response.content, response.status_code
        if response.status_code == 204 or not response.content:
            return None, response.status_code
        return response.json(), response.status_code

    async def request(
        self,
        path: str,
        method: str = "GET",
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        token: Optional[str] = None,
        fallback: str = "Request failed",
        status_messages: Optional[Mapping[int, str]] = None,
        response_type: ResponseType = "json",
        decode: Optional[Callable[[Any], Any]] = None,
    ) -> ApiResult[Any]:
        method = method.upper()
        with ApiCallLogger(method, path) as call_log:
            try:
                bearer = await self._resolve_token(token)
                data, status = await self._send(
                    path,
                    method,
                    params=params,
                    json=json,
                    token=bearer,
                    response_type=response_type,
                )
                if decode is not None:
                    data = decode(data)
            except TrackedError as exc:
                status = exc.status if isinstance(exc, ApiError) else None
                message = extract_error_message(exc, fallback, status_messages)
                call_log.error(message, status)
                return ApiFailure(error=message, status=status)
            except Exception as exc:
                logger.warning("Undecodable response for %s %s: %s", method, path, exc)
                call_log.error(str(exc))
                return ApiFailure(error=fallback)
            call_log.success(status, has_token=bool(bearer))
            return ApiSuccess(data=data)


def create_api_call(
    token_provider: Optional[TokenProvider] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ApiClient:
    """Build the HTTP action wrapper every endpoint class talks through."""
    return ApiClient(settings, token_provider=token_provider, transport=transport)


def precondition_failure(message: str) -> ApiFailure:
    """Short-circuit result for a request that must not be sent."""
    error = PreconditionError(message)
    logger.info("Precondition failed: %s", error.with_trace())
    return ApiFailure(error=extract_error_message(error, message))


__all__ = [
    "ApiClient",
    "TokenProvider",
    "clean_params",
    "create_api_call",
    "precondition_failure",
]
