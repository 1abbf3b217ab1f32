"""Alarm service - personal alert scheduler.

Keeps timestamped and recurring alerts in a plain-text alarm file and
runs a polling daemon that shows each alert when its time arrives.
"""

from .models import AlertMode, AlertRecord, Decision, MonitorState
from .exceptions import (
    AlarmError,
    ValidationError,
    EncodeError,
    DecodeError,
    StoreIOError,
    InvalidTimespec,
    NotFoundError,
)
from .alert_store import AlertStore
from .reconciler import decide
from .operations import new_alert, change_alert, delete_alert, list_alerts
from .monitor import AlarmMonitor, run_daemon

__all__ = [
    # Models
    "AlertMode",
    "AlertRecord",
    "Decision",
    "MonitorState",
    # Errors
    "AlarmError",
    "ValidationError",
    "EncodeError",
    "DecodeError",
    "StoreIOError",
    "InvalidTimespec",
    "NotFoundError",
    # Store
    "AlertStore",
    # Scheduling
    "decide",
    "AlarmMonitor",
    "run_daemon",
    # Operations
    "new_alert",
    "change_alert",
    "delete_alert",
    "list_alerts",
]
