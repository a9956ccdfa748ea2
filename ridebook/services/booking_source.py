from typing import Optional

import httpx
from pydantic import ValidationError

from ridebook.core.config import settings
from ridebook.core.errors import SourceFetchFailure
from ridebook.core.logger import get_logger
from ridebook.models.booking import BookingBundle

logger = get_logger("booking_source")

UNAUTHORIZED = "Session expired. Please login again."
SERVER_ERROR = "Server error. Please try again later."
NETWORK_ERROR = "Network error. Please check your connection."
TIMEOUT_ERROR = "Request timeout. Please try again."


class BookingSourceClient:
    """
    Reads the two role-scoped booking views from the booking backend.

    The guest view holds the user's own rentals and service jobs, the host view
    holds rentals of the user's listed cars (plus the same service jobs).
    """

    def __init__(self, token: Optional[str], base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.token = token
        self.base_url = (base_url or settings.BOOKING_API_BASE_URL).rstrip("/")
        self._client = client

    def _headers(self) -> dict:
        if not self.token:
            raise SourceFetchFailure(UNAUTHORIZED, status=401)
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _get(self, client: httpx.AsyncClient, path: str) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"Booking source GET {url}")
        try:
            return await client.get(url, headers=self._headers())
        except httpx.TimeoutException as e:
            raise SourceFetchFailure(TIMEOUT_ERROR) from e
        except httpx.HTTPError as e:
            raise SourceFetchFailure(NETWORK_ERROR) from e

    async def fetch_bundle(self, path: str) -> BookingBundle:
        if self._client is not None:
            resp = await self._get(self._client, path)
        else:
            async with httpx.AsyncClient(timeout=settings.BOOKING_API_TIMEOUT_SECONDS) as client:
                resp = await self._get(client, path)

        try:
            data = resp.json() if resp.content else {}
        except ValueError as e:
            raise SourceFetchFailure(SERVER_ERROR, status=resp.status_code) from e

        if resp.status_code >= 400:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error(f"Booking source error {resp.status_code} on {path}: {resp.text[:300]}")
            raise SourceFetchFailure(message or SERVER_ERROR, status=resp.status_code)

        if not isinstance(data, dict):
            raise SourceFetchFailure(SERVER_ERROR, status=resp.status_code)

        try:
            return BookingBundle.model_validate(data)
        except ValidationError as e:
            raise SourceFetchFailure(f"Unexpected booking payload: {e.error_count()} errors", status=resp.status_code) from e

    async def get_guest_bookings(self) -> BookingBundle:
        return await self.fetch_bundle(settings.GUEST_BOOKINGS_PATH)

    async def get_host_bookings(self) -> BookingBundle:
        return await self.fetch_bundle(settings.HOST_BOOKINGS_PATH)
