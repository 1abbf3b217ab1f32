"""File-backed alert storage."""

import logging
import os
import tempfile
from pathlib import Path

from .codec import decode, encode
from ..config import config
from ..exceptions import DecodeError, StoreIOError
from ..models import AlertRecord

logger = logging.getLogger(__name__)


class AlertStore:
    """Plain-text alarm file holding one alert per line."""

    def __init__(self, path: str | Path | None = None):
        """Initialize alert store.

        Args:
            path: Path to the alarm file. Defaults to ALARM_FILE env var
                  or ~/.alarms
        """
        self.path = Path(os.path.expanduser(str(path or config.ALARM_FILE)))

    def __repr__(self) -> str:
        return f"AlertStore({str(self.path)!r})"

    def _read_lines(self) -> list[bytes]:
        """Read raw lines, split on newline only; a missing file has none.

        Lines stay undecoded so that one line with broken encoding cannot
        spoil the others.
        """
        if not self.path.exists():
            return []
        try:
            content = self.path.read_bytes()
        except OSError as e:
            raise StoreIOError(f"Cannot read alarm file {self.path}: {e}") from e

        lines = content.split(b"\n")
        if lines[-1] == b"":
            lines.pop()
        return lines

    @staticmethod
    def _decode_line(raw: bytes) -> AlertRecord:
        """Decode one raw line into a record.

        Raises:
            DecodeError: If the line is not valid UTF-8 or not a valid record
        """
        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Line is not valid UTF-8: {e}") from e
        return decode(line)

    def _write_lines(self, lines: list[bytes]) -> None:
        """Atomically replace the file contents with the given lines.

        The new contents go to a temporary file in the same directory which
        is then moved over the alarm file, so readers see either the old or
        the new file, never a partial one.
        """
        content = b"".join(line + b"\n" for line in lines)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as e:
            raise StoreIOError(f"Cannot write alarm file {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise StoreIOError(f"Cannot write alarm file {self.path}: {e}") from e

    # Reading

    def load(self) -> list[AlertRecord]:
        """Read every decodable alert, in file order.

        Lines that fail to decode are logged and skipped.
        """
        records = []
        for lineno, line in enumerate(self._read_lines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(self._decode_line(line))
            except DecodeError as e:
                logger.warning(f"Skipping malformed line {lineno} in {self.path}: {e}")
        return records

    def list_alerts(self) -> list[AlertRecord]:
        """Return all alerts for display."""
        return self.load()

    def get(self, alert_id: int) -> AlertRecord | None:
        """Get an alert by ID."""
        for record in self.load():
            if record.id == alert_id:
                return record
        return None

    def next_id(self) -> int:
        """Return the ID for a new alert: one past the highest stored ID."""
        try:
            records = self.load()
        except StoreIOError:
            return 1
        if not records:
            return 1
        return max(record.id for record in records) + 1

    # Writing

    def append(self, record: AlertRecord) -> None:
        """Append one alert to the file.

        Raises:
            EncodeError: If the record cannot be stored (nothing is written)
            StoreIOError: If the file cannot be written
        """
        line = encode(record).encode("utf-8")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "ab") as f:
                f.write(line + b"\n")
        except OSError as e:
            raise StoreIOError(f"Cannot write alarm file {self.path}: {e}") from e

        logger.debug(f"Appended alert {record.id} to {self.path}")

    def rewrite(self, records: list[AlertRecord]) -> None:
        """Replace the whole collection with the given records."""
        self._write_lines([encode(record).encode("utf-8") for record in records])

    def remove_by_id(self, alert_id: int) -> bool:
        """Remove every alert with the given ID.

        Lines that cannot be decoded are kept as they are.

        Returns:
            True if a matching alert was found and removed
        """
        lines = self._read_lines()
        kept = [line for line in lines if self._line_id(line) != alert_id]
        if len(kept) == len(lines):
            return False

        self._write_lines(kept)
        logger.debug(f"Removed alert {alert_id} from {self.path}")
        return True

    def replace(self, record: AlertRecord) -> bool:
        """Substitute the stored alert having the same ID, keeping its position.

        Returns:
            True if an alert with that ID existed and was replaced
        """
        new_line = encode(record).encode("utf-8")
        lines = self._read_lines()
        found = False
        updated = []
        for line in lines:
            if self._line_id(line) == record.id:
                if not found:
                    updated.append(new_line)
                found = True
            else:
                updated.append(line)

        if not found:
            return False

        self._write_lines(updated)
        logger.debug(f"Replaced alert {record.id} in {self.path}")
        return True

    @classmethod
    def _line_id(cls, line: bytes) -> int | None:
        """ID of a raw line, or None if the line does not decode."""
        if not line.strip():
            return None
        try:
            return cls._decode_line(line).id
        except DecodeError:
            return None
