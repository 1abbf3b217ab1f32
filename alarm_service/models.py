"""Data models for the alarm service."""

from dataclasses import dataclass, field
from enum import Enum


class AlertMode(Enum):
    """How an alert behaves once its time arrives."""
    ONE_SHOT = "n"    # Fires once, then is deleted
    RECURRING = "r"   # Fires on every occurrence, never deleted

    @classmethod
    def from_char(cls, char: str) -> "AlertMode":
        """Map a stored mode character to a mode.

        Anything other than 'n' is treated as recurring, which is how
        alarm files have always been read.
        """
        if char == cls.ONE_SHOT.value:
            return cls.ONE_SHOT
        return cls.RECURRING


class MonitorState(Enum):
    """Lifecycle of the polling daemon."""
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class AlertRecord:
    """A single persisted alert."""
    id: int
    mode: AlertMode
    when: str  # "YYYY-MM-DD HH:MM" for one-shot, recurrence spec for recurring
    message: str

    @property
    def is_recurring(self) -> bool:
        return self.mode == AlertMode.RECURRING


@dataclass
class Decision:
    """Outcome of reconciling the alert list against the current time."""
    to_fire: list[AlertRecord] = field(default_factory=list)
    to_delete: list[int] = field(default_factory=list)
    invalid: list[tuple[AlertRecord, str]] = field(default_factory=list)
