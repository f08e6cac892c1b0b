from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class RequestState:
    """Loading/error flags of one logical operation.

    ``loading`` and ``error`` are never both set once a request settles.
    """

    loading: bool = False
    loading_more: bool = False
    error: Optional[str] = None

    def start(self, *, append: bool = False) -> None:
        self.error = None
        if append:
            self.loading_more = True
        else:
            self.loading = True
            self.loading_more = False

    def succeed(self) -> None:
        self.loading = False
        self.loading_more = False
        self.error = None

    def fail(self, message: str) -> None:
        self.loading = False
        self.loading_more = False
        self.error = message

    def reset(self) -> None:
        self.loading = False
        self.loading_more = False
        self.error = None


__all__ = ["RequestState"]
