from .base import EntityStore, Listener
from .detail import DetailSlot
from .guard import GuardSlot, RequestGuard, Ticket, request_key
from .paginated import PageFetcher, PaginatedList, requested_page
from .persistence import StatePersistence
from .state import RequestState

__all__ = [
    "EntityStore",
    "Listener",
    "DetailSlot",
    "GuardSlot",
    "RequestGuard",
    "Ticket",
    "request_key",
    "PageFetcher",
    "PaginatedList",
    "requested_page",
    "StatePersistence",
    "RequestState",
]
