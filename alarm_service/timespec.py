"""Date/time specifications for alerts.

One-shot alerts are resolved to an absolute minute when they are created
and stored as ``YYYY-MM-DD HH:MM``. Recurring alerts keep their
specification verbatim and are matched against the clock on every poll.

Recurrence grammar (case-insensitive, tokens separated by spaces or commas):

    spec    := [days] [time]   (in either order)
    days    := daily | everyday | weekdays | weekends
             | weekday [weekday ...]
             | daynum month | month daynum
    time    := HH:MM (24h) | H[:MM]am | H[:MM]pm

No day part means every day, no time means midnight. The filler words
"every", "on" and "at" are ignored, so "every friday at 18:00" works.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from dateutil import parser as date_parser

from .exceptions import InvalidTimespec

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
DISPLAY_FORMAT = "%d %b %Y %H:%M"

WEEKDAYS = {
    "mon": 0, "monday": 0,
    "tue": 1, "tues": 1, "tuesday": 1,
    "wed": 2, "wednesday": 2,
    "thu": 3, "thur": 3, "thurs": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_FILLER_WORDS = {"every", "on", "at"}

_RELATIVE_RE = re.compile(
    r"^(?:\+\s*|in\s+)(\d+)\s*(minutes?|mins?|m|hours?|hrs?|h|days?|d|weeks?|w)$"
)
_RELATIVE_UNITS = {"m": "minutes", "h": "hours", "d": "days", "w": "weeks"}

# Either H[:MM] followed by am/pm, or HH:MM in 24h form
_TIME_RE = re.compile(
    r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b|\b(\d{1,2}):(\d{2})\b"
)
_DAYNUM_RE = re.compile(r"(\d{1,2})(?:st|nd|rd|th)?")


# One-shot timestamps

def format_timestamp(moment: datetime) -> str:
    """Render a moment in the stored one-shot form."""
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse a stored one-shot timestamp.

    Raises:
        InvalidTimespec: If the text is not in YYYY-MM-DD HH:MM form
    """
    try:
        return datetime.strptime(text.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        raise InvalidTimespec(f"Invalid timestamp {text!r}") from None


def display_timestamp(text: str) -> str:
    """Human-readable form of a stored timestamp, or the text unchanged."""
    try:
        return parse_timestamp(text).strftime(DISPLAY_FORMAT)
    except InvalidTimespec:
        return text


def _parse_datetime(text: str, default: datetime) -> datetime:
    try:
        result = date_parser.parse(text, default=default)
    except (ValueError, OverflowError) as e:
        raise InvalidTimespec(f"Invalid date/time {text!r}: {e}") from e

    if result.tzinfo is not None:
        result = result.astimezone().replace(tzinfo=None)
    return result.replace(second=0, microsecond=0)


def resolve_timespec(text: str, now: datetime | None = None) -> datetime:
    """Resolve a user supplied date/time to an absolute minute.

    Accepts anything python-dateutil understands ("2024-01-01 10:00",
    "20:15", "friday 18:00"), plus "now", "today [time]",
    "tomorrow [time]" and relative offsets like "+10 minutes" or
    "in 2 hours". A bare time or weekday resolves relative to today.

    Args:
        text: The date/time specification
        now: Reference time (defaults to the current time)

    Returns:
        The resolved moment, truncated to the minute

    Raises:
        InvalidTimespec: If the text cannot be resolved
    """
    now = (now or datetime.now()).replace(second=0, microsecond=0)
    spec = text.strip().lower()
    if not spec:
        raise InvalidTimespec("Empty date/time specification")

    if spec == "now":
        return now

    match = _RELATIVE_RE.match(spec)
    if match:
        amount = int(match.group(1))
        unit = _RELATIVE_UNITS[match.group(2)[0]]
        try:
            return now + timedelta(**{unit: amount})
        except OverflowError as e:
            raise InvalidTimespec(f"Offset out of range: {text!r}") from e

    midnight = now.replace(hour=0, minute=0)
    first, _, rest = spec.partition(" ")
    if first in ("today", "tomorrow"):
        offset = timedelta(days=1 if first == "tomorrow" else 0)
        if not rest.strip():
            return now + offset
        return _parse_datetime(rest, default=midnight + offset)

    return _parse_datetime(spec, default=midnight)


# Recurrence

@dataclass(frozen=True)
class Recurrence:
    """A parsed recurring alert specification."""
    weekdays: frozenset[int] = frozenset()  # Empty = no weekday restriction
    month: int | None = None
    day: int | None = None
    hour: int = 0
    minute: int = 0

    def matches_day(self, day: date) -> bool:
        """Check if the alert occurs on the given date."""
        if self.month is not None:
            return day.month == self.month and day.day == self.day
        if self.weekdays:
            return day.weekday() in self.weekdays
        return True

    def occurrence_on(self, day: date) -> datetime | None:
        """The moment the alert occurs on the given date, if it does."""
        if not self.matches_day(day):
            return None
        return datetime.combine(day, time(self.hour, self.minute))

    def fires_within(self, now: datetime, window: timedelta) -> bool:
        """Check if an occurrence falls in the window (now - window, now]."""
        if window <= timedelta(0):
            return False
        start = now - window
        day = start.date()
        while day <= now.date():
            occurrence = self.occurrence_on(day)
            if occurrence is not None and start < occurrence <= now:
                return True
            day += timedelta(days=1)
        return False


def _parse_time(match: re.Match) -> tuple[int, int]:
    if match.group(3):
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minute > 59:
            raise InvalidTimespec(f"Invalid time {match.group(0)!r}")
        hour %= 12
        if match.group(3) == "pm":
            hour += 12
        return hour, minute

    hour = int(match.group(4))
    minute = int(match.group(5))
    if hour > 23 or minute > 59:
        raise InvalidTimespec(f"Invalid time {match.group(0)!r}")
    return hour, minute


def parse_recurrence(text: str) -> Recurrence:
    """Parse a recurring alert specification.

    Examples: "friday", "fri 18:00", "weekdays 7:30am", "daily 22:00",
    "1 may 20:00", "dec 25".

    Raises:
        InvalidTimespec: If the specification does not follow the grammar
    """
    spec = text.strip().lower()
    if not spec:
        raise InvalidTimespec("Empty recurrence specification")

    hour, minute = 0, 0
    time_matches = list(_TIME_RE.finditer(spec))
    if len(time_matches) > 1:
        raise InvalidTimespec(f"More than one time in {text!r}")
    if time_matches:
        match = time_matches[0]
        hour, minute = _parse_time(match)
        spec = spec[:match.start()] + " " + spec[match.end():]

    weekdays: set[int] = set()
    every_day = False
    month = None
    day = None

    for token in re.split(r"[\s,]+", spec.strip()):
        if not token or token in _FILLER_WORDS:
            continue
        if token in ("daily", "everyday"):
            every_day = True
        elif token == "weekdays":
            weekdays.update(range(5))
        elif token == "weekends":
            weekdays.update((5, 6))
        elif token in WEEKDAYS:
            weekdays.add(WEEKDAYS[token])
        elif token in MONTHS:
            if month is not None:
                raise InvalidTimespec(f"More than one month in {text!r}")
            month = MONTHS[token]
        elif _DAYNUM_RE.fullmatch(token):
            if day is not None:
                raise InvalidTimespec(f"More than one day number in {text!r}")
            day = int(_DAYNUM_RE.fullmatch(token).group(1))
        else:
            raise InvalidTimespec(f"Unrecognised token {token!r} in {text!r}")

    if (month is None) != (day is None):
        raise InvalidTimespec(f"A date needs both a day and a month: {text!r}")
    if month is not None:
        if weekdays or every_day:
            raise InvalidTimespec(f"Cannot combine a date with days of the week: {text!r}")
        # 2000 is a leap year, so 29 feb is accepted
        if not 1 <= day <= calendar.monthrange(2000, month)[1]:
            raise InvalidTimespec(f"No such date: {text!r}")
    if every_day and weekdays:
        raise InvalidTimespec(f"Cannot combine daily with days of the week: {text!r}")

    return Recurrence(
        weekdays=frozenset(weekdays),
        month=month,
        day=day,
        hour=hour,
        minute=minute,
    )


def validate_recurrence(text: str) -> str:
    """Check a recurrence specification, returning it unchanged."""
    parse_recurrence(text)
    return text
