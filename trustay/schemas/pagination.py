from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

from pydantic import ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .common import WireModel

T = TypeVar("T")


class PaginationMeta(WireModel):
    """Pagination cursor for one page of a list endpoint.

    ``has_next``/``has_prev`` are always derived from ``page`` and
    ``total_pages``; whatever the backend sent for them is overwritten.
    ``item_count`` is the size of the current page, not of the accumulated
    collection.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    page: int = 1
    limit: int = 20
    total: int = 0
    total_pages: int = 1
    has_next: bool = False
    has_prev: bool = False
    item_count: int = 0

    @model_validator(mode="after")
    def _derive_flags(self) -> "PaginationMeta":
        self.has_next = self.page < self.total_pages
        self.has_prev = self.page > 1
        return self

    @classmethod
    def synthesize(cls, *, page: int, limit: int, total: int, item_count: int) -> "PaginationMeta":
        limit = max(1, int(limit))
        total_pages = max(1, math.ceil(total / limit))
        return cls(page=page, limit=limit, total=total, total_pages=total_pages, item_count=item_count)

    def advance(self, incoming: "PaginationMeta") -> "PaginationMeta":
        """Cursor after appending ``incoming`` onto a collection that ended at ``self``."""
        return PaginationMeta(
            page=incoming.page,
            limit=self.limit,
            total=incoming.total,
            total_pages=incoming.total_pages,
            item_count=incoming.item_count,
        )


@dataclass
class ListPage(Generic[T]):
    """One decoded page: canonical ``{data: T[], meta}`` shape."""

    data: List[T] = field(default_factory=list)
    meta: PaginationMeta = field(default_factory=PaginationMeta)


@dataclass
class EntityEnvelope(Generic[T]):
    """Canonical ``{data: T}`` shape."""

    data: T


__all__ = ["PaginationMeta", "ListPage", "EntityEnvelope"]
