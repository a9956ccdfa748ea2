import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from ridebook.core.config import settings
from ridebook.core.errors import RouteUnavailable, SameCityError
from ridebook.core.logger import get_logger
from ridebook.models.trip import GeoPoint, RouteDistanceResult
from ridebook.services.fare_service import round_half_up

logger = get_logger(__name__)

DISTANCE_UNAVAILABLE = "distance unavailable"
ZERO_DISTANCE = RouteDistanceResult(distance_km=0, duration_minutes=0)

RouteProvider = Callable[[GeoPoint, GeoPoint], Awaitable[RouteDistanceResult]]


async def _route_request(client: httpx.AsyncClient, origin: GeoPoint, destination: GeoPoint) -> RouteDistanceResult:
    # OSRM takes lng,lat pairs
    coordinates = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
    url = f"{settings.OSRM_BASE_URL}/route/v1/{settings.ROUTING_PROFILE}/{coordinates}"

    try:
        response = await client.get(url, params={"overview": "false", "steps": "false"})
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise RouteUnavailable(f"OSRM request failed: {e}") from e

    if not isinstance(data, dict):
        raise RouteUnavailable("Unexpected OSRM payload")

    routes = data.get("routes")
    if data.get("code") != "Ok" or not routes:
        raise RouteUnavailable(data.get("message") or "No route found between these locations")

    try:
        meters = float(routes[0]["distance"])
        seconds = float(routes[0]["duration"])
    except (KeyError, TypeError, ValueError) as e:
        raise RouteUnavailable(f"Malformed OSRM route: {e}") from e

    return RouteDistanceResult(
        distance_km=round(meters / 1000, 2),
        duration_minutes=round_half_up(seconds / 60),
    )


async def get_road_distance(
    origin: GeoPoint,
    destination: GeoPoint,
    client: Optional[httpx.AsyncClient] = None,
) -> RouteDistanceResult:
    """
    Road distance (km) and driving time (minutes) between two points
    using the OSRM route service.

    Only the aggregate summary is requested (no geometry, no steps).
    Raises RouteUnavailable on transport errors, non-2xx responses,
    a non-"Ok" route code or an empty route list.
    """
    if client is not None:
        return await _route_request(client, origin, destination)

    async with httpx.AsyncClient(timeout=settings.ROUTING_TIMEOUT_SECONDS) as client:
        return await _route_request(client, origin, destination)


class ResolverState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


class DistanceResolver:
    """
    Keeps the road distance for the current (origin, destination) pair.

    Every endpoint change bumps a generation counter. An attempt remembers the
    generation it started under and only commits if that is still the latest
    one when the provider answers; older answers are dropped.
    """

    def __init__(self, provider: RouteProvider = get_road_distance, timeout: Optional[float] = None):
        self._provider = provider
        self._timeout = settings.ROUTING_TIMEOUT_SECONDS if timeout is None else timeout
        self._generation = 0
        self._origin: Optional[GeoPoint] = None
        self._destination: Optional[GeoPoint] = None
        self._inflight: Optional[asyncio.Task] = None
        self.state = ResolverState.IDLE
        self.result: Optional[RouteDistanceResult] = None
        self.error_message: Optional[str] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def endpoints(self):
        return self._origin, self._destination

    def set_endpoints(
        self,
        origin: Optional[GeoPoint],
        destination: Optional[GeoPoint],
        origin_city: Optional[str] = None,
        destination_city: Optional[str] = None,
    ) -> int:
        """Replace the trip endpoints and invalidate any earlier result. Returns the new generation."""
        self._generation += 1
        self.result = None
        self.error_message = None

        if origin_city and destination_city and origin_city.strip().lower() == destination_city.strip().lower():
            self._origin, self._destination = origin, None
            self.state = ResolverState.IDLE
            raise SameCityError(f"Pickup and drop are both in {origin_city}")

        self._origin, self._destination = origin, destination
        if origin is None or destination is None:
            self.state = ResolverState.IDLE
        else:
            self.state = ResolverState.RESOLVING
        return self._generation

    def request(self, origin: Optional[GeoPoint], destination: Optional[GeoPoint], **cities) -> Optional[asyncio.Task]:
        """Set endpoints and start resolving in the background once both sides are known."""
        self.set_endpoints(origin, destination, **cities)
        if self.state is not ResolverState.RESOLVING:
            self._inflight = None
            return None
        self._inflight = asyncio.create_task(self.resolve())
        return self._inflight

    async def resolve(self) -> Optional[RouteDistanceResult]:
        """
        One resolution attempt for the current endpoints.

        Returns the committed result, or None when the attempt failed or was
        overtaken by a newer endpoint change.
        """
        origin, destination = self._origin, self._destination
        if origin is None or destination is None:
            return None

        generation = self._generation
        self.state = ResolverState.RESOLVING

        try:
            result = await asyncio.wait_for(self._provider(origin, destination), timeout=self._timeout)
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Dropping stale routing failure for generation {generation}")
                return None
            self.state = ResolverState.FAILED
            self.result = None
            self.error_message = DISTANCE_UNAVAILABLE
            if isinstance(e, (RouteUnavailable, asyncio.TimeoutError)):
                logger.warning(f"Road distance unavailable: {e!r}")
            else:
                logger.error(f"Routing provider error: {e!r}")
            return None

        if generation != self._generation:
            logger.debug(f"Dropping stale route for generation {generation} (current {self._generation})")
            return None

        self.state = ResolverState.RESOLVED
        self.result = result
        self.error_message = None
        logger.info(f"Road distance {result.distance_km} km, ~{result.duration_minutes} min")
        return result

    async def distance_for_action(self) -> RouteDistanceResult:
        """
        Distance to use when the user commits to a trip.

        Waits for an in-flight attempt, otherwise makes one last attempt, and
        settles for a zero distance rather than blocking the booking.
        """
        if self.state is ResolverState.RESOLVED and self.result is not None:
            return self.result

        inflight = self._inflight
        if self.state is ResolverState.RESOLVING and inflight is not None and not inflight.done():
            await asyncio.shield(inflight)
            if self.state is ResolverState.RESOLVED and self.result is not None:
                return self.result

        result = await self.resolve()
        if result is None:
            logger.warning("Proceeding with zero distance after routing fallback failed")
            return ZERO_DISTANCE.model_copy()
        return result
