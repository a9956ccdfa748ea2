from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ridebook.models.booking import BookingBundle, ClassificationBucket
from ridebook.models.trip import GeoPoint


class UnifyRequest(BaseModel):
    self_bundle: BookingBundle = Field(default_factory=BookingBundle)
    counterparty_bundle: Optional[BookingBundle] = None
    bucket: Optional[ClassificationBucket] = None
    now: Optional[datetime] = Field(None, description="Classification clock; defaults to server time")


class DistanceRequest(BaseModel):
    origin: GeoPoint
    destination: GeoPoint
    origin_city: Optional[str] = None
    destination_city: Optional[str] = None


class FareRequest(BaseModel):
    distance_km: float
    rate_per_km: float
    insure_trip: bool = False


class QuoteRequest(DistanceRequest):
    rate_per_km: float
    insure_trip: bool = False
