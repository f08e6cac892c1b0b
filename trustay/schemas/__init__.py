from .common import Entity, WireModel
from .pagination import EntityEnvelope, ListPage, PaginationMeta
from .room import RoomDetail, RoomListing, RoomLocation, RoomPricing, RoomSearchParams
from .room_seeking import (
    CreateRoomSeekingPostRequest,
    RoomSeekingPost,
    RoomSeekingStatus,
    UpdateRoomSeekingPostRequest,
)
from .booking import (
    BookingRequest,
    BookingStatus,
    CancelBookingRequestRequest,
    ConfirmBookingRequestRequest,
    CreateBookingRequestRequest,
    UpdateBookingRequestRequest,
)
from .rental import (
    CreateRentalRequest,
    Rental,
    RentalStatus,
    TerminateRentalRequest,
    UpdateRentalRequest,
)
from .contract import (
    Contract,
    ContractPdfOptions,
    ContractStatus,
    ContractTerms,
    CreateContractRequest,
    GeneratedPdf,
)
from .bill import Bill, BillItem, BillStatus, CreateBillRequest, UpdateBillRequest
from .rating import (
    CreateRatingRequest,
    Rating,
    RatingPage,
    RatingStatistics,
    RatingTargetType,
    UpdateRatingRequest,
)

__all__ = [
    "Entity",
    "WireModel",
    "EntityEnvelope",
    "ListPage",
    "PaginationMeta",
    "RoomDetail",
    "RoomListing",
    "RoomLocation",
    "RoomPricing",
    "RoomSearchParams",
    "CreateRoomSeekingPostRequest",
    "RoomSeekingPost",
    "RoomSeekingStatus",
    "UpdateRoomSeekingPostRequest",
    "BookingRequest",
    "BookingStatus",
    "CancelBookingRequestRequest",
    "ConfirmBookingRequestRequest",
    "CreateBookingRequestRequest",
    "UpdateBookingRequestRequest",
    "CreateRentalRequest",
    "Rental",
    "RentalStatus",
    "TerminateRentalRequest",
    "UpdateRentalRequest",
    "Contract",
    "ContractPdfOptions",
    "ContractStatus",
    "ContractTerms",
    "CreateContractRequest",
    "GeneratedPdf",
    "Bill",
    "BillItem",
    "BillStatus",
    "CreateBillRequest",
    "UpdateBillRequest",
    "CreateRatingRequest",
    "Rating",
    "RatingPage",
    "RatingStatistics",
    "RatingTargetType",
    "UpdateRatingRequest",
]
