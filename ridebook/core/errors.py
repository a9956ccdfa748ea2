from typing import Optional


class RidebookError(Exception):
    """Base class for every error raised by the booking and trip core."""


class MalformedInput(RidebookError):
    """A raw payload field could not be coerced. Never escapes the normalizer."""


class SourceFetchFailure(RidebookError):
    """A booking source view could not be fetched or decoded."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RouteUnavailable(RidebookError):
    """The routing provider returned no usable route."""


class SameCityError(RidebookError):
    """Pickup and drop resolve to the same city."""
