import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from ridebook.core.errors import MalformedInput
from ridebook.core.logger import get_logger
from ridebook.models.booking import (
    BookingCategory,
    CounterpartyDescriptor,
    RawBookingRecord,
    RawCar,
    RawRentalRecord,
    RawServiceRecord,
    UnifiedBooking,
    VehicleDescriptor,
)

logger = get_logger(__name__)

DEFAULT_STATUS = {
    BookingCategory.RENTAL: "confirmed",
    BookingCategory.SERVICE: "pending",
}

PLACEHOLDER_IMAGE = {
    BookingCategory.RENTAL: "https://via.placeholder.com/400x200/90EE90/000000?text=Car",
    BookingCategory.SERVICE: "https://via.placeholder.com/400x200/E8F4FD/000000?text=Service",
}

UNKNOWN_MAKE = "Unknown"
GENERIC_VEHICLE_NAME = "My Car"
DEFAULT_PLAN_NAME = "Car Service"

_datetime_adapter = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Best-effort timestamp parsing. Naive values are taken as UTC; junk becomes None."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValidationError:
        if not isinstance(value, str):
            return None
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_amount(value: Any) -> float:
    """Coerce a monetary field to a number; anything unusable is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def text_or_none(value: Any) -> Optional[str]:
    """Display strings; numbers are stringified, anything else is dropped."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def to_minutes(value: Any) -> Optional[int]:
    minutes = to_amount(value)
    return int(minutes + 0.5) if minutes > 0 else None


def _status(raw_status: Any, category: BookingCategory) -> str:
    status = (text_or_none(raw_status) or "").lower()
    return status or DEFAULT_STATUS[category]


def _vehicle(car: Optional[RawCar], category: BookingCategory) -> VehicleDescriptor:
    car = car or RawCar()
    make = text_or_none(car.make)
    parts = [part for part in (make, text_or_none(car.model), text_or_none(car.year)) if part]
    return VehicleDescriptor(
        make=make or UNKNOWN_MAKE,
        display_name=" ".join(parts) or GENERIC_VEHICLE_NAME,
        image_url=text_or_none(car.thumbnail) or PLACEHOLDER_IMAGE[category],
    )


def _booking_id(raw_id: Any) -> str:
    booking_id = text_or_none(raw_id) if isinstance(raw_id, (str, int)) else None
    if not booking_id:
        raise MalformedInput("booking has no id")
    return booking_id


def normalize_rental(raw: RawRentalRecord) -> Optional[UnifiedBooking]:
    try:
        booking_id = _booking_id(raw.id)
    except MalformedInput as e:
        logger.warning(f"Skipping rental booking: {e}")
        return None

    self_drive = raw.self_drive
    intercity = raw.intercity
    start = (self_drive and self_drive.start_datetime) or (intercity and intercity.pickup_datetime)
    end = (self_drive and self_drive.end_datetime) or (intercity and intercity.drop_datetime)

    counterparty = None
    if raw.guest is not None:
        name, phone = text_or_none(raw.guest.name), text_or_none(raw.guest.phone)
        if name or phone:
            counterparty = CounterpartyDescriptor(name=name, phone=phone)

    return UnifiedBooking(
        id=booking_id,
        category=BookingCategory.RENTAL,
        status=_status(raw.status, BookingCategory.RENTAL),
        created_at=parse_timestamp(raw.created_at),
        relevant_date=parse_timestamp(end),
        amount=to_amount(raw.total_amount),
        vehicle=_vehicle(raw.car, BookingCategory.RENTAL),
        counterparty=counterparty,
        booking_type=text_or_none(raw.booking_type),
        start_date=parse_timestamp(start),
    )


def normalize_service(raw: RawServiceRecord) -> Optional[UnifiedBooking]:
    try:
        booking_id = _booking_id(raw.id)
    except MalformedInput as e:
        logger.warning(f"Skipping service booking: {e}")
        return None

    plan = raw.plan
    amount = to_amount(raw.total_price)
    if not amount and plan is not None:
        amount = to_amount(plan.price)

    return UnifiedBooking(
        id=booking_id,
        category=BookingCategory.SERVICE,
        status=_status(raw.status, BookingCategory.SERVICE),
        created_at=parse_timestamp(raw.created_at),
        relevant_date=parse_timestamp(raw.scheduled_at),
        amount=amount,
        vehicle=_vehicle(raw.car, BookingCategory.SERVICE),
        plan_name=(text_or_none(plan.name) if plan else None) or DEFAULT_PLAN_NAME,
        plan_duration_minutes=to_minutes(plan.duration_minutes) if plan else None,
    )


def normalize(raw: RawBookingRecord, category: BookingCategory) -> Optional[UnifiedBooking]:
    if category is BookingCategory.RENTAL:
        return normalize_rental(raw)
    return normalize_service(raw)
