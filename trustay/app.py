"""Wires settings, persistence, the HTTP wrapper and every store together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from .api.auth import TokenManager
from .api.client import ApiClient, create_api_call
from .api.endpoints import (
    BillsApi,
    BookingRequestsApi,
    ContractsApi,
    ListingsApi,
    RatingsApi,
    RentalsApi,
    RoomSeekingApi,
)
from .config import Settings, get_settings
from .db import Database
from .log import setup_logging
from .store import StatePersistence
from .stores import (
    BillStore,
    BookingRequestStore,
    ContractStore,
    RatingStore,
    RentalStore,
    RoomSeekingStore,
    RoomStore,
)

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """Handle passed to callers instead of module-level store singletons."""

    settings: Settings
    client: ApiClient
    tokens: TokenManager
    database: Database
    rooms: RoomStore
    room_seeking: RoomSeekingStore
    booking_requests: BookingRequestStore
    rentals: RentalStore
    contracts: ContractStore
    bills: BillStore
    ratings: RatingStore

    async def aclose(self) -> None:
        await self.client.aclose()
        self.database.dispose()

    async def __aenter__(self) -> "Stores":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def build_stores(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = False,
) -> Stores:
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(Path(settings.log_dir) if settings.log_dir else None, settings.log_level.upper())

    database = database or Database(settings.state_database_url)
    persistence = StatePersistence(database, settings.state_namespace)
    tokens = TokenManager(persistence, settings)
    client = create_api_call(tokens.get_access_token, settings=settings, transport=transport)

    listings = ListingsApi(client)
    posts = RoomSeekingApi(client)
    bookings = BookingRequestsApi(client)
    rentals = RentalsApi(client)
    contracts = ContractsApi(client)
    bills = BillsApi(client)
    ratings = RatingsApi(client)

    page_size = settings.default_page_size
    logger.debug("Stores wired against %s", client.base_url)
    return Stores(
        settings=settings,
        client=client,
        tokens=tokens,
        database=database,
        rooms=RoomStore(
            listings,
            persistence=persistence,
            featured_limit=settings.featured_limit,
            page_size=page_size,
        ),
        room_seeking=RoomSeekingStore(posts, listings, persistence=persistence, page_size=page_size),
        booking_requests=BookingRequestStore(bookings, rentals, contracts, persistence=persistence, page_size=page_size),
        rentals=RentalStore(rentals, persistence=persistence, page_size=page_size),
        contracts=ContractStore(
            contracts,
            persistence=persistence,
            page_size=page_size,
            pdf_retry_delay_seconds=settings.pdf_retry_delay_seconds,
        ),
        bills=BillStore(bills, persistence=persistence, page_size=page_size),
        ratings=RatingStore(ratings, persistence=persistence, page_size=page_size),
    )


__all__ = ["Stores", "build_stores"]
