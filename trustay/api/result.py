from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ApiSuccess(Generic[T]):
    data: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class ApiFailure:
    error: str
    status: Optional[int] = None

    @property
    def success(self) -> bool:
        return False


ApiResult = Union[ApiSuccess[T], ApiFailure]


__all__ = ["ApiSuccess", "ApiFailure", "ApiResult"]
