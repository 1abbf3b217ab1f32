"""Exception types raised by the alarm service."""


class AlarmError(Exception):
    """Base class for all alarm service errors."""


class ValidationError(AlarmError):
    """Required input is missing or invalid. Raised before anything is written."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class EncodeError(AlarmError):
    """A record cannot be rendered as a store line."""


class DecodeError(AlarmError):
    """A store line cannot be parsed into a record."""


class StoreIOError(AlarmError):
    """The alarm file could not be read or written."""


class InvalidTimespec(AlarmError):
    """A date/time or recurrence specification could not be resolved."""


class NotFoundError(AlarmError):
    """No alert exists with the requested ID."""
