from typing import Optional
from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RouteDistanceResult(BaseModel):
    distance_km: float = Field(..., ge=0)
    duration_minutes: int = Field(..., ge=0)


class TripFareEstimate(BaseModel):
    distance_km: float
    rate_per_km: float
    base_amount: int
    insurance_amount: int = 0
    tax_amount: int
    total_amount: int


class TripEndpoint(BaseModel):
    point: GeoPoint
    city: Optional[str] = None
