"""Decode the backend's response envelopes into one canonical shape.

The backend is inconsistent about wrapping: the same resource can come back
as ``{"data": T}`` or bare ``T``, and lists as a bare array, as
``{"data": [...], "meta": {...}}`` or as ``{"data": [...], "pagination": {...}}``.
Money columns are serialized as ``{"s", "e", "d"}`` decimal objects whose
``d`` holds one decimal digit per entry.
Everything downstream only ever sees ``EntityEnvelope`` or ``ListPage``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel

from ..schemas.pagination import EntityEnvelope, ListPage, PaginationMeta

M = TypeVar("M", bound=BaseModel)

# Arrays with an entry above 9 are read as base-1e7 words, the first one
# unpadded. An all-single-digit array is always read as digits, so a word
# array such as [1, 5] (10000005) cannot be told apart and is not lossless.
_WORD_WIDTH = 7


def is_decimal_object(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    if set(value.keys()) != {"s", "e", "d"}:
        return False
    digits = value.get("d")
    return digits is None or (isinstance(digits, list) and all(isinstance(item, int) for item in digits))


def _digit_string(words: list[int]) -> str:
    if all(0 <= word <= 9 for word in words):
        return "".join(str(word) for word in words)
    head, *tail = words
    return str(head) + "".join(str(word).zfill(_WORD_WIDTH) for word in tail)


def decimal_to_string(value: Mapping[str, Any]) -> str:
    """Render a ``{s, e, d}`` decimal object as a plain decimal string.

    ``e`` is the base-10 exponent of the first significant digit, so
    ``{s: 1, e: 1, d: [2, 5]}`` is ``"25"`` and ``{s: -1, e: -2, d: [3, 4]}``
    is ``"-0.034"``. No floating point is involved.
    """
    sign = value.get("s")
    exponent = value.get("e")
    words = value.get("d")

    if words is None:
        if sign is None or exponent is None:
            return "NaN"
        return "-Infinity" if sign == -1 else "Infinity"
    if not words:
        return "0"

    digits = _digit_string(list(words)).rstrip("0")
    if not digits:
        return "0"

    number = Decimal(
        (
            1 if sign == -1 else 0,
            tuple(int(char) for char in digits),
            int(exponent) - len(digits) + 1,
        )
    )
    return format(number, "f")


def parse_decimal_fields(obj: Any) -> Any:
    """Recursively replace every decimal object in ``obj`` by its string form."""
    if obj is None:
        return None
    if isinstance(obj, list):
        return [parse_decimal_fields(item) for item in obj]
    if is_decimal_object(obj):
        return decimal_to_string(obj)
    if isinstance(obj, Mapping):
        return {key: parse_decimal_fields(item) for key, item in obj.items()}
    return obj


def _decode(model: Type[M], payload: Any) -> M:
    if isinstance(payload, model):
        return payload
    return model.model_validate(parse_decimal_fields(payload))


def normalize_entity(raw: Any, model: Type[M]) -> EntityEnvelope[M]:
    """Accept ``{data: T}`` or bare ``T``."""
    if isinstance(raw, Mapping) and "data" in raw and isinstance(raw["data"], Mapping):
        return EntityEnvelope(data=_decode(model, raw["data"]))
    if isinstance(raw, Mapping):
        return EntityEnvelope(data=_decode(model, raw))
    raise ValueError(f"Unexpected entity payload of type {type(raw).__name__}")


def _pagination_block(raw: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    for key in ("meta", "pagination"):
        block = raw.get(key)
        if isinstance(block, Mapping):
            return block
    return None


def normalize_list(raw: Any, model: Type[M], *, page: int = 1, limit: int = 20) -> ListPage[M]:
    """Accept ``T[]``, ``{data: T[], meta}`` or ``{data: T[], pagination}``.

    When no pagination block is present, one is synthesized from the
    requested ``page``/``limit`` with the array length as ``total``.
    """
    block: Optional[Mapping[str, Any]] = None
    if isinstance(raw, list):
        items = raw
    elif isinstance(raw, Mapping) and isinstance(raw.get("data"), list):
        items = raw["data"]
        block = _pagination_block(raw)
    elif isinstance(raw, Mapping) and isinstance(raw.get("items"), list):
        items = raw["items"]
        block = _pagination_block(raw)
    else:
        raise ValueError(f"Unexpected list payload of type {type(raw).__name__}")

    data = [_decode(model, item) for item in items]
    if block is None:
        meta = PaginationMeta.synthesize(page=page, limit=limit, total=len(data), item_count=len(data))
    else:
        fields = dict(block)
        fields.setdefault("page", page)
        fields.setdefault("limit", limit)
        fields.setdefault("total", len(data))
        fields["itemCount"] = len(data)
        fields.pop("item_count", None)
        if "totalPages" not in fields and "total_pages" not in fields:
            fields["totalPages"] = PaginationMeta.synthesize(
                page=fields["page"], limit=fields["limit"], total=fields["total"], item_count=len(data)
            ).total_pages
        meta = PaginationMeta.model_validate(fields)
    return ListPage(data=data, meta=meta)


__all__ = [
    "is_decimal_object",
    "decimal_to_string",
    "parse_decimal_fields",
    "normalize_entity",
    "normalize_list",
]
