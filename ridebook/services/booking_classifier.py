from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from ridebook.models.booking import ClassificationBucket, UnifiedBooking

TERMINAL_STATUSES = frozenset({"completed", "cancelled"})
IN_PROGRESS = "in_progress"

NEUTRAL_BADGE_COLOR = "#6B7280"
PRIMARY_BADGE_COLOR = "#1A73E8"
STATUS_BADGES = {
    "in_progress": ("IN PROGRESS", PRIMARY_BADGE_COLOR),
    "confirmed": ("CONFIRMED", PRIMARY_BADGE_COLOR),
    "scheduled": ("SCHEDULED", "#6366F1"),
    "pending": ("PENDING", "#F59E0B"),
    "completed": ("COMPLETED", "#6B7280"),
    "cancelled": ("CANCELLED", "#EF4444"),
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def classify(booking: UnifiedBooking, now: datetime) -> ClassificationBucket:
    """
    Bucket a booking against `now`.

    Precedence is fixed:
      1. completed / cancelled        -> past (even with a future date)
      2. relevant date before now     -> past
      3. in_progress                  -> ongoing
      4. anything else, or no date    -> upcoming
    """
    if booking.status in TERMINAL_STATUSES:
        return ClassificationBucket.PAST
    if booking.relevant_date is not None and _aware(booking.relevant_date) < _aware(now):
        return ClassificationBucket.PAST
    if booking.status == IN_PROGRESS:
        return ClassificationBucket.ONGOING
    return ClassificationBucket.UPCOMING


def filter_by_bucket(
    bookings: Iterable[UnifiedBooking],
    bucket: ClassificationBucket,
    now: datetime,
) -> List[UnifiedBooking]:
    # Membership depends on the clock, so this is recomputed on every call
    return [booking for booking in bookings if classify(booking, now) == bucket]


def status_badge(status: str) -> Tuple[str, str]:
    return STATUS_BADGES.get(status, (status.upper(), NEUTRAL_BADGE_COLOR))


def amount_label(booking: UnifiedBooking, now: Optional[datetime] = None) -> str:
    bucket = classify(booking, now or utc_now())
    return "TOTAL PAID" if bucket is ClassificationBucket.PAST else "AMOUNT DUE"
