from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ridebook.core.config import settings
from ridebook.models.trip import TripFareEstimate

CUSTOM_FARE_LABEL = "Custom"


def round_half_up(value: float) -> int:
    """Round to the nearest whole rupee, halves going up (no banker's rounding)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def estimate_fare(
    distance_km: float,
    rate_per_km: float,
    insure_trip: bool = False,
    insurance_per_km: Optional[float] = None,
    tax_rate: Optional[float] = None,
) -> Optional[TripFareEstimate]:
    """
    All-inclusive fare for a trip.

      base      = round(distance_km * rate_per_km)
      insurance = round(distance_km * insurance_per_km) when the trip is insured
      tax       = round((base + insurance) * GST)
      total     = base + insurance + tax

    Returns None when either the distance or the rate is not positive; callers
    show a "quote on request" label instead of a number.
    """
    if distance_km is None or rate_per_km is None:
        return None
    if distance_km <= 0 or rate_per_km <= 0:
        return None

    if insurance_per_km is None:
        insurance_per_km = settings.INSURANCE_PER_KM
    if tax_rate is None:
        tax_rate = settings.GST_RATE

    base = round_half_up(distance_km * rate_per_km)
    insurance = round_half_up(distance_km * insurance_per_km) if insure_trip else 0
    tax = round_half_up((base + insurance) * tax_rate)

    return TripFareEstimate(
        distance_km=distance_km,
        rate_per_km=rate_per_km,
        base_amount=base,
        insurance_amount=insurance,
        tax_amount=tax,
        total_amount=base + insurance + tax,
    )


def format_inr(amount: int) -> str:
    # Indian digit grouping: last three digits, then pairs (1,23,45,678)
    digits = str(abs(int(amount)))
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail]) if groups else tail
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{grouped}"


def format_fare(estimate: Optional[TripFareEstimate]) -> str:
    if estimate is None or not estimate.total_amount:
        return CUSTOM_FARE_LABEL
    return format_inr(estimate.total_amount)
