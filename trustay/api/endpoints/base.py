from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from ..client import ApiClient
from ..normalize import normalize_entity, normalize_list
from ..result import ApiResult

M = TypeVar("M", bound=BaseModel)

QueryParams = Union[Mapping[str, Any], BaseModel, None]


def to_query(params: QueryParams) -> dict[str, Any]:
    if params is None:
        return {}
    if hasattr(params, "to_query"):
        return dict(params.to_query())
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", by_alias=True, exclude_none=True)
    return {key: value for key, value in params.items() if value is not None}


def to_body(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    return payload


class EndpointGroup:
    """Server actions for one backend resource."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def _entity(
        self,
        path: str,
        model: Type[M],
        *,
        method: str = "GET",
        json: Any = None,
        fallback: str,
        status_messages: Optional[Mapping[int, str]] = None,
    ) -> ApiResult[M]:
        return await self.client.request(
            path,
            method,
            json=to_body(json),
            fallback=fallback,
            status_messages=status_messages,
            decode=lambda raw: normalize_entity(raw, model).data,
        )

    async def _page(
        self,
        path: str,
        model: Type[M],
        params: QueryParams,
        *,
        fallback: str,
        default_limit: int = 20,
    ) -> ApiResult[Any]:
        query = to_query(params)
        page = int(query.get("page") or 1)
        limit = int(query.get("limit") or default_limit)
        return await self.client.request(
            path,
            "GET",
            params=query,
            fallback=fallback,
            decode=lambda raw: normalize_list(raw, model, page=page, limit=limit),
        )

    async def _command(
        self,
        path: str,
        *,
        method: str,
        json: Any = None,
        fallback: str,
    ) -> ApiResult[Any]:
        return await self.client.request(path, method, json=to_body(json), fallback=fallback)


__all__ = ["EndpointGroup", "QueryParams", "to_query", "to_body"]
