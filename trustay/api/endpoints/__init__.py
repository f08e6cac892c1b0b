from .base import EndpointGroup, to_body, to_query
from .bills import BillsApi
from .booking_requests import BookingRequestsApi
from .contracts import ContractsApi
from .listings import ListingsApi
from .ratings import RatingsApi
from .rentals import RentalsApi
from .room_seeking import RoomSeekingApi

__all__ = [
    "EndpointGroup",
    "to_body",
    "to_query",
    "BillsApi",
    "BookingRequestsApi",
    "ContractsApi",
    "ListingsApi",
    "RatingsApi",
    "RentalsApi",
    "RoomSeekingApi",
]
