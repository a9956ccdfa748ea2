from typing import List, Optional
from pydantic import BaseModel

from ridebook.models.booking import ClassificationBucket, UnifiedBooking
from ridebook.models.trip import RouteDistanceResult, TripFareEstimate


class BookingView(UnifiedBooking):
    bucket: ClassificationBucket
    badge_label: str
    badge_color: str
    amount_label: str


class BookingFeedResponse(BaseModel):
    count: int
    bookings: List[BookingView]


class FareResponse(BaseModel):
    estimate: Optional[TripFareEstimate] = None
    display: str


class QuoteResponse(BaseModel):
    route: RouteDistanceResult
    distance_resolved: bool
    fare: FareResponse
