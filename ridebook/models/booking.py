from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingCategory(str, Enum):
    RENTAL = "rental"
    SERVICE = "service"


class ClassificationBucket(str, Enum):
    ONGOING = "ongoing"
    UPCOMING = "upcoming"
    PAST = "past"


# -------------------------------------------------------------------
# Raw payloads as the booking backend sends them
#
# Leaves are typed Any and coerced by the normalizer; a nested object
# or a record of the wrong shape is dropped on its own.
# -------------------------------------------------------------------
def _mapping_or_none(value):
    return value if isinstance(value, (dict, BaseModel)) else None


class RawCar(BaseModel):
    make: Optional[Any] = None
    model: Optional[Any] = None
    year: Optional[Any] = None
    thumbnail: Optional[Any] = None


class RawSelfDrive(BaseModel):
    start_datetime: Optional[Any] = None
    end_datetime: Optional[Any] = None


class RawIntercity(BaseModel):
    pickup_datetime: Optional[Any] = None
    drop_datetime: Optional[Any] = None


class RawGuest(BaseModel):
    name: Optional[Any] = None
    phone: Optional[Any] = None


class RawPlan(BaseModel):
    name: Optional[Any] = None
    price: Optional[Any] = None
    duration_minutes: Optional[Any] = None


class RawRentalRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Any] = None
    status: Optional[Any] = None
    created_at: Optional[Any] = Field(None, alias="createdAt")
    booking_type: Optional[Any] = None  # SELF_DRIVE or INTERCITY
    total_amount: Optional[Any] = None
    car: Optional[RawCar] = None
    self_drive: Optional[RawSelfDrive] = None
    intercity: Optional[RawIntercity] = None
    guest: Optional[RawGuest] = None

    @field_validator("car", "self_drive", "intercity", "guest", mode="before")
    @classmethod
    def _drop_non_objects(cls, value):
        return _mapping_or_none(value)


class RawServiceRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Any] = None
    status: Optional[Any] = None
    created_at: Optional[Any] = Field(None, alias="createdAt")
    scheduled_at: Optional[Any] = None
    total_price: Optional[Any] = None
    car: Optional[RawCar] = None
    plan: Optional[RawPlan] = None

    @field_validator("car", "plan", mode="before")
    @classmethod
    def _drop_non_objects(cls, value):
        return _mapping_or_none(value)


RawBookingRecord = Union[RawRentalRecord, RawServiceRecord]


class BookingBundle(BaseModel):
    """One source view's bookings. The backend names the lists `rental` and `service`."""

    model_config = ConfigDict(populate_by_name=True)

    rentals: List[RawRentalRecord] = Field(default_factory=list, alias="rental")
    services: List[RawServiceRecord] = Field(default_factory=list, alias="service")

    @field_validator("rentals", "services", mode="before")
    @classmethod
    def _only_record_objects(cls, value):
        if not isinstance(value, (list, tuple)):
            return []
        return [record for record in value if _mapping_or_none(record) is not None]


# -------------------------------------------------------------------
# Normalized shape
# -------------------------------------------------------------------
class VehicleDescriptor(BaseModel):
    make: str
    display_name: str
    image_url: str


class CounterpartyDescriptor(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class UnifiedBooking(BaseModel):
    id: str = Field(..., min_length=1)
    category: BookingCategory
    status: str = Field(..., min_length=1)
    created_at: Optional[datetime] = None
    relevant_date: Optional[datetime] = None
    amount: float = 0
    vehicle: VehicleDescriptor
    counterparty: Optional[CounterpartyDescriptor] = None

    # display passthrough
    booking_type: Optional[str] = None
    start_date: Optional[datetime] = None
    plan_name: Optional[str] = None
    plan_duration_minutes: Optional[int] = None

    @property
    def identity(self) -> tuple:
        return (self.category, self.id)
