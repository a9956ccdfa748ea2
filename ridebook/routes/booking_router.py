from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Header, Query

from ridebook.core.logger import get_logger
from ridebook.models.booking import ClassificationBucket, UnifiedBooking
from ridebook.models.request import UnifyRequest
from ridebook.models.response import BookingFeedResponse, BookingView
from ridebook.services.booking_classifier import amount_label, classify, filter_by_bucket, status_badge, utc_now
from ridebook.services.booking_service import is_host_role, load_booking_feed, unify
from ridebook.services.booking_source import BookingSourceClient

booking_router = APIRouter(prefix="/bookings", tags=["Bookings"])

logger = get_logger(__name__)


def _feed_response(bookings: List[UnifiedBooking], bucket: Optional[ClassificationBucket], now: datetime) -> BookingFeedResponse:
    if bucket is not None:
        bookings = filter_by_bucket(bookings, bucket, now)

    views = []
    for booking in bookings:
        label, color = status_badge(booking.status)
        views.append(
            BookingView(
                **booking.model_dump(),
                bucket=classify(booking, now),
                badge_label=label,
                badge_color=color,
                amount_label=amount_label(booking, now),
            )
        )
    return BookingFeedResponse(count=len(views), bookings=views)


@booking_router.post("/unify", response_model=BookingFeedResponse)
async def unify_bookings(payload: UnifyRequest):
    now = payload.now or utc_now()
    bookings = unify(payload.self_bundle, payload.counterparty_bundle)
    logger.info(
        f"Unified {len(bookings)} bookings "
        f"(counterparty={'yes' if payload.counterparty_bundle is not None else 'no'}, bucket={payload.bucket})"
    )
    return _feed_response(bookings, payload.bucket, now)


@booking_router.get("/feed", response_model=BookingFeedResponse)
async def booking_feed(
    role: str = Query("guest", description="Acting role; 'host' also loads bookings of listed cars"),
    bucket: Optional[ClassificationBucket] = Query(None),
    authorization: Optional[str] = Header(None),
):
    token = None
    if authorization:
        token = authorization.removeprefix("Bearer ").strip() or None

    client = BookingSourceClient(token)
    bookings = await load_booking_feed(client, is_host_role(role))
    return _feed_response(bookings, bucket, utc_now())
