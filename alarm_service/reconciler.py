"""Decide which alerts fire on a poll.

Pure functions only: no file access, no notifications, no clock reads.
"""

from datetime import datetime, timedelta

from .exceptions import InvalidTimespec
from .models import AlertMode, AlertRecord, Decision
from .timespec import parse_recurrence, parse_timestamp

DEFAULT_WINDOW = timedelta(seconds=60)


def is_due(record: AlertRecord, now: datetime, window: timedelta = DEFAULT_WINDOW) -> bool:
    """
    Check whether a single alert fires on the poll at `now`.

    One-shot alerts are due once `now` has reached their time, including
    when the poll is late. Recurring alerts are due only when one of their
    occurrences falls inside the poll window (now - window, now].

    Raises:
        InvalidTimespec: If the alert's time cannot be interpreted
    """
    if record.mode == AlertMode.ONE_SHOT:
        return now >= parse_timestamp(record.when)
    return parse_recurrence(record.when).fires_within(now, window)


def decide(
    now: datetime,
    records: list[AlertRecord],
    window: timedelta = DEFAULT_WINDOW,
) -> Decision:
    """
    Reconcile the alert list against the current time.

    Args:
        now: Time of this poll
        records: All stored alerts, in file order
        window: Span of time this poll is responsible for

    Returns:
        Decision with the alerts to fire (in file order), the one-shot IDs
        to delete afterwards, and the alerts skipped as uninterpretable
    """
    decision = Decision()

    for record in records:
        try:
            due = is_due(record, now, window)
        except InvalidTimespec as e:
            decision.invalid.append((record, str(e)))
            continue

        if not due:
            continue

        decision.to_fire.append(record)
        if record.mode == AlertMode.ONE_SHOT and record.id not in decision.to_delete:
            decision.to_delete.append(record.id)

    return decision
