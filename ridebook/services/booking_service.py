import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from ridebook.core.errors import SourceFetchFailure
from ridebook.core.logger import get_logger
from ridebook.models.booking import BookingBundle, RawServiceRecord, UnifiedBooking
from ridebook.services.booking_normalizer import normalize_rental, normalize_service
from ridebook.services.booking_source import BookingSourceClient

logger = get_logger("booking_service")

HOST_ROLE = "host"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# -------------------------------------------------------------------
# Merge helpers
# -------------------------------------------------------------------
def _dedupe_services(self_bundle: BookingBundle, counterparty_bundle: Optional[BookingBundle]) -> List[RawServiceRecord]:
    # Later writes win but the key keeps its first position, so the
    # counterparty copy replaces the self copy in place.
    merged: Dict[str, RawServiceRecord] = {}
    sources = [self_bundle.services]
    if counterparty_bundle is not None:
        sources.append(counterparty_bundle.services)
    for services in sources:
        for record in services:
            key = str(record.id) if record.id is not None else f"__missing_{id(record)}"
            merged[key] = record
    return list(merged.values())


def _created_sort_key(booking: UnifiedBooking):
    if booking.created_at is None:
        return (0, _EPOCH)
    created = booking.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (1, created)


def sort_newest_first(bookings: List[UnifiedBooking]) -> List[UnifiedBooking]:
    # sorted() is stable under reverse=True, so ties keep input order
    return sorted(bookings, key=_created_sort_key, reverse=True)


def unify(self_bundle: BookingBundle, counterparty_bundle: Optional[BookingBundle] = None) -> List[UnifiedBooking]:
    """
    Merge one or two booking views into a single feed, newest first.

    Output is counterparty rentals, then self rentals, then the deduplicated
    service jobs, before sorting. Rentals are never deduplicated across views;
    a service job present in both views keeps only the counterparty copy.
    """
    rentals = []
    if counterparty_bundle is not None:
        rentals.extend(counterparty_bundle.rentals)
    rentals.extend(self_bundle.rentals)

    unified: List[UnifiedBooking] = []
    for raw in rentals:
        booking = normalize_rental(raw)
        if booking is not None:
            unified.append(booking)
    for raw in _dedupe_services(self_bundle, counterparty_bundle):
        booking = normalize_service(raw)
        if booking is not None:
            unified.append(booking)

    return sort_newest_first(unified)


# -------------------------------------------------------------------
# Loading from the booking backend
# -------------------------------------------------------------------
def is_host_role(role: Union[str, List[str], None]) -> bool:
    if isinstance(role, (list, tuple)):
        role = role[0] if role else None
    return (role or "guest").strip().lower() == HOST_ROLE


async def _fetch_both(client: BookingSourceClient):
    fetches = [
        asyncio.ensure_future(client.get_guest_bookings()),
        asyncio.ensure_future(client.get_host_bookings()),
    ]
    try:
        return await asyncio.gather(*fetches)
    except BaseException:
        # the surviving fetch would only be thrown away
        for fetch in fetches:
            fetch.cancel()
        raise


async def load_booking_feed(client: BookingSourceClient, is_host: bool) -> List[UnifiedBooking]:
    """
    Fetch and unify the bookings visible to the current user.

    Hosts need both views, fetched together; if either one fails nothing is
    merged and the feed is empty.
    """
    try:
        if is_host:
            guest_bundle, host_bundle = await _fetch_both(client)
            bookings = unify(guest_bundle, host_bundle)
        else:
            bookings = unify(await client.get_guest_bookings())
    except SourceFetchFailure as e:
        logger.error(f"Error fetching bookings (status={e.status}): {e}")
        return []

    logger.info(f"Loaded {len(bookings)} bookings (host={is_host})")
    return bookings
