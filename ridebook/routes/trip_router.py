from fastapi import APIRouter, HTTPException

from ridebook.core.errors import RouteUnavailable, SameCityError
from ridebook.core.logger import get_logger
from ridebook.models.request import DistanceRequest, FareRequest, QuoteRequest
from ridebook.models.response import FareResponse, QuoteResponse
from ridebook.models.trip import RouteDistanceResult
from ridebook.services.distance_service import DISTANCE_UNAVAILABLE, DistanceResolver, ResolverState, get_road_distance
from ridebook.services.fare_service import estimate_fare, format_fare

trip_router = APIRouter(prefix="/trip", tags=["Trip"])

logger = get_logger(__name__)


def _fare(distance_km: float, rate_per_km: float, insure_trip: bool) -> FareResponse:
    estimate = estimate_fare(distance_km, rate_per_km, insure_trip=insure_trip)
    return FareResponse(estimate=estimate, display=format_fare(estimate))


@trip_router.post("/distance", response_model=RouteDistanceResult)
async def trip_distance(payload: DistanceRequest):
    if (
        payload.origin_city
        and payload.destination_city
        and payload.origin_city.strip().lower() == payload.destination_city.strip().lower()
    ):
        raise HTTPException(status_code=400, detail="Pickup and drop cannot be in the same city")

    logger.info(f"calling distance service for {payload.origin} to {payload.destination}")
    try:
        return await get_road_distance(payload.origin, payload.destination)
    except RouteUnavailable as e:
        logger.warning(f"Distance lookup failed: {e}")
        raise HTTPException(status_code=502, detail=DISTANCE_UNAVAILABLE)


@trip_router.post("/fare", response_model=FareResponse)
async def trip_fare(payload: FareRequest):
    return _fare(payload.distance_km, payload.rate_per_km, payload.insure_trip)


@trip_router.post("/quote", response_model=QuoteResponse)
async def trip_quote(payload: QuoteRequest):
    resolver = DistanceResolver(provider=get_road_distance)
    try:
        resolver.set_endpoints(
            payload.origin,
            payload.destination,
            origin_city=payload.origin_city,
            destination_city=payload.destination_city,
        )
    except SameCityError as e:
        raise HTTPException(status_code=400, detail=str(e))

    route = await resolver.distance_for_action()
    resolved = resolver.state is ResolverState.RESOLVED
    if not resolved:
        logger.info("Quoting without a road distance; fare falls back to custom pricing")

    return QuoteResponse(
        route=route,
        distance_resolved=resolved,
        fare=_fare(route.distance_km, payload.rate_per_km, payload.insure_trip),
    )
