"""Alert operations used by the command line client."""

import logging
from datetime import datetime

from .alert_store import AlertStore
from .exceptions import NotFoundError, ValidationError
from .models import AlertMode, AlertRecord
from .timespec import format_timestamp, resolve_timespec, validate_recurrence

logger = logging.getLogger(__name__)


def _require(**fields) -> None:
    """Raise ValidationError naming every empty or blank field."""
    missing = [
        name for name, value in fields.items()
        if not value or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(
            "No {} specified.".format(" or ".join(missing)),
            missing=missing,
        )


def build_record(
    alert_id: int,
    timespec: str,
    message: str,
    repeat: bool = False,
    now: datetime | None = None,
) -> AlertRecord:
    """Build a record from user input.

    One-shot specifications are resolved to an absolute minute now;
    recurring ones are checked against the recurrence grammar and kept
    as typed.

    Raises:
        InvalidTimespec: If the specification cannot be interpreted
    """
    if repeat:
        return AlertRecord(
            id=alert_id,
            mode=AlertMode.RECURRING,
            when=validate_recurrence(timespec.strip()),
            message=message,
        )
    return AlertRecord(
        id=alert_id,
        mode=AlertMode.ONE_SHOT,
        when=format_timestamp(resolve_timespec(timespec, now)),
        message=message,
    )


def new_alert(
    store: AlertStore,
    timespec: str | None,
    message: str | None,
    repeat: bool = False,
    alert_id: int | None = None,
    now: datetime | None = None,
) -> int:
    """Create an alert.

    Args:
        store: The alert store
        timespec: When the alert fires (date/time, or recurrence if repeat)
        message: Text shown when the alert fires
        repeat: Create a recurring alert
        alert_id: Explicit ID; next free ID if None
        now: Reference time for relative specifications

    Returns:
        The ID of the new alert

    Raises:
        ValidationError: Missing timespec/message, or unusable explicit ID
        InvalidTimespec: The timespec cannot be interpreted
        EncodeError: The message or timespec contains '|' or a line break
        StoreIOError: The alarm file cannot be written
    """
    _require(timespec=timespec, message=message)

    if alert_id is None:
        alert_id = store.next_id()
    elif alert_id <= 0:
        raise ValidationError(f"Alert ID must be positive, got {alert_id}.")
    elif store.get(alert_id) is not None:
        raise ValidationError(f"Alert ID {alert_id} is already in use.")

    record = build_record(alert_id, timespec, message, repeat=repeat, now=now)
    store.append(record)

    logger.debug(f"New alert added (ID {record.id}, {record.mode.name}, {record.when})")
    return record.id


def change_alert(
    store: AlertStore,
    alert_id: int | None,
    timespec: str | None,
    message: str | None,
    repeat: bool = False,
    strict: bool = False,
    now: datetime | None = None,
) -> int:
    """Change an alert, keeping its ID.

    By default this deletes the alert and creates it again, so changing an
    ID that does not exist simply creates it. The two steps are not atomic:
    if the new timespec turns out to be invalid the old alert is already
    gone.

    With strict=True a missing ID raises NotFoundError, and an existing
    alert is replaced in place with a single atomic rewrite.

    Returns:
        The ID of the changed alert
    """
    _require(id=alert_id, timespec=timespec, message=message)

    if strict:
        record = build_record(alert_id, timespec, message, repeat=repeat, now=now)
        if not store.replace(record):
            raise NotFoundError(f"No alert with ID {alert_id}.")
        logger.debug(f"Changed alert {alert_id}")
        return alert_id

    if not store.remove_by_id(alert_id):
        logger.debug(f"Alert {alert_id} did not exist, creating it")
    return new_alert(store, timespec, message, repeat=repeat, alert_id=alert_id, now=now)


def delete_alert(store: AlertStore, alert_id: int | None) -> bool:
    """Delete an alert.

    Returns:
        True if the alert existed
    """
    _require(id=alert_id)
    return store.remove_by_id(alert_id)


def list_alerts(store: AlertStore, alert_id: int | None = None) -> list[AlertRecord]:
    """List all alerts, or only the one with the given ID."""
    records = store.list_alerts()
    if alert_id is not None:
        records = [record for record in records if record.id == alert_id]
    return records
