"""Shared fixtures for booking and trip tests."""

from datetime import datetime, timedelta, timezone

import pytest

from ridebook.models.booking import BookingBundle


NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


@pytest.fixture
def now():
    """Fixed classification clock."""
    return NOW


@pytest.fixture
def make_rental():
    """Build a raw rental payload the way the booking backend sends it."""

    def _make(booking_id, created_at, status="confirmed", end=None, **extra):
        payload = {
            "id": booking_id,
            "status": status,
            "createdAt": iso(created_at),
            "booking_type": "SELF_DRIVE",
            "total_amount": "2500",
            "car": {"make": "Hyundai", "model": "Creta", "year": 2022},
        }
        if end is not None:
            payload["self_drive"] = {"start_datetime": iso(end - timedelta(days=2)), "end_datetime": iso(end)}
        payload.update(extra)
        return payload

    return _make


@pytest.fixture
def make_service():
    """Build a raw service-job payload."""

    def _make(booking_id, created_at, status="pending", scheduled=None, **extra):
        payload = {
            "id": booking_id,
            "status": status,
            "createdAt": iso(created_at),
            "total_price": 1499,
            "plan": {"name": "Basic Service", "price": 1499, "duration_minutes": 90},
        }
        if scheduled is not None:
            payload["scheduled_at"] = iso(scheduled)
        payload.update(extra)
        return payload

    return _make


@pytest.fixture
def bundle():
    """Wrap raw lists into a BookingBundle using the backend's wire keys."""

    def _bundle(rentals=(), services=()):
        return BookingBundle.model_validate({"rental": list(rentals), "service": list(services)})

    return _bundle
