from .bills import BillStore
from .booking_requests import ApprovalOutcome, BookingRequestStore
from .contracts import ContractStore
from .ratings import RatingStore
from .rentals import RentalStore
from .room_seeking import RoomSeekingStore
from .rooms import RoomStore

__all__ = [
    "BillStore",
    "ApprovalOutcome",
    "BookingRequestStore",
    "ContractStore",
    "RatingStore",
    "RentalStore",
    "RoomSeekingStore",
    "RoomStore",
]
