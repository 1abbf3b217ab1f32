"""Shared fixtures for alarm service tests."""

import pytest

from alarm_service.alert_store import AlertStore
from alarm_service.alerters import BaseAlerter
from alarm_service.config import Config


class RecordingAlerter(BaseAlerter):
    """Alerter that remembers messages instead of showing them."""

    def __init__(self, fail_on: set[str] | None = None, deliver: bool = True):
        self.messages: list[str] = []
        self.fail_on = fail_on or set()
        self.deliver = deliver

    def notify(self, message: str) -> bool:
        self.messages.append(message)
        if message in self.fail_on:
            raise RuntimeError(f"cannot show {message!r}")
        return self.deliver

    def get_alert_count(self) -> int:
        return len(self.messages)


@pytest.fixture
def alarm_file(tmp_path):
    """Path of a not yet existing alarm file."""
    return tmp_path / "alarms"


@pytest.fixture
def store(alarm_file):
    """Alert store backed by a temporary file."""
    return AlertStore(alarm_file)


@pytest.fixture
def write_alarms(alarm_file):
    """Write raw lines to the alarm file."""
    def _write(*lines: str) -> None:
        alarm_file.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return _write


@pytest.fixture
def recorder():
    return RecordingAlerter()


@pytest.fixture
def make_recorder():
    """Factory for alerters that fail or refuse delivery."""
    return RecordingAlerter


@pytest.fixture
def no_channels(monkeypatch):
    """Clear every optional alert channel from the configuration."""
    monkeypatch.setattr(Config, "NOTIFY_COMMAND", None)
    monkeypatch.setattr(Config, "SMTP_SERVER", None)
    monkeypatch.setattr(Config, "ALERT_EMAIL_TO", [])
    monkeypatch.setattr(Config, "TEAMS_WEBHOOK_URL", None)
    monkeypatch.setattr("alarm_service.alerters.desktop.detect_command", lambda: None)
