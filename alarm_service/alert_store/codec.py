"""Line codec for the alarm file.

Each alert is stored as one line: ``id|mode|when|message``. The format has
no escaping, so the delimiter and line breaks are illegal inside fields.
"""

from ..exceptions import DecodeError, EncodeError
from ..models import AlertMode, AlertRecord

DELIMITER = "|"
FIELD_COUNT = 4

_ILLEGAL = (DELIMITER, "\n", "\r")


def _check_field(name: str, value: str) -> None:
    for char in _ILLEGAL:
        if char in value:
            raise EncodeError(f"Alert {name} may not contain {char!r}: {value!r}")


def encode(record: AlertRecord) -> str:
    """Render a record as a store line (without the trailing newline)."""
    if not record.message.strip():
        raise EncodeError(f"Alert {record.id} has an empty message")
    _check_field("time", record.when)
    _check_field("message", record.message)
    return DELIMITER.join(
        [str(record.id), record.mode.value, record.when, record.message]
    )


def decode(line: str) -> AlertRecord:
    """Parse one store line into a record.

    Raises:
        DecodeError: If the line does not have exactly four fields or the
            ID is not a positive integer
    """
    fields = line.rstrip("\r\n").split(DELIMITER)
    if len(fields) != FIELD_COUNT:
        raise DecodeError(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}: {line!r}"
        )

    raw_id, mode_char, when, message = fields
    try:
        alert_id = int(raw_id)
    except ValueError:
        raise DecodeError(f"Invalid alert ID {raw_id!r}") from None
    if alert_id <= 0:
        raise DecodeError(f"Alert ID must be positive, got {alert_id}")

    return AlertRecord(
        id=alert_id,
        mode=AlertMode.from_char(mode_char),
        when=when,
        message=message,
    )
