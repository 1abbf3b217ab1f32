"""Alerter implementations for the alarm service."""

from .base import BaseAlerter
from .console import ConsoleAlerter
from .desktop import DesktopAlerter
from .email import EmailAlerter
from .teams import TeamsAlerter
from .multi_channel import MultiChannelAlerter, create_alerter_from_config

__all__ = [
    "BaseAlerter",
    "ConsoleAlerter",
    "DesktopAlerter",
    "EmailAlerter",
    "TeamsAlerter",
    "MultiChannelAlerter",
    "create_alerter_from_config",
]
