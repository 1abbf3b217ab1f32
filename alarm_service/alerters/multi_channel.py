"""Multi-channel alerter.

Sends every alert through all configured channels:
- Console: always
- Desktop: when notify-send, xmessage or ALARM_NOTIFY_COMMAND is available
- Email: when SMTP and recipients are configured
- Teams: when a webhook URL is configured
"""

import logging

from .base import BaseAlerter
from .console import ConsoleAlerter
from .desktop import DesktopAlerter
from .email import EmailAlerter
from .teams import TeamsAlerter
from ..config import config

logger = logging.getLogger(__name__)


class MultiChannelAlerter(BaseAlerter):
    """Fan an alert out to several channels."""

    def __init__(self, channels: dict[str, BaseAlerter]):
        """
        Initialize multi-channel alerter.

        Args:
            channels: Alerters keyed by channel name, tried in order
        """
        self.channels = channels
        self.alert_count = 0

    def notify(self, message: str) -> bool:
        """Send the alert through every channel.

        A failing channel does not stop the others. Succeeds if at least
        one channel delivered the alert.
        """
        success = False
        for name, channel in self.channels.items():
            try:
                if channel.notify(message):
                    success = True
                else:
                    logger.warning(f"Channel {name} did not deliver alert")
            except Exception as e:
                logger.exception(f"Channel {name} failed: {e}")

        if success:
            self.alert_count += 1
        return success

    def get_alert_count(self) -> int:
        """Return total number of alerts sent."""
        return self.alert_count

    def get_summary(self) -> dict:
        """Get alert counts overall and per channel."""
        return {
            "total": self.alert_count,
            "channels": {
                name: channel.get_alert_count()
                for name, channel in self.channels.items()
            },
        }


def create_alerter_from_config(enable_console: bool = True) -> BaseAlerter:
    """
    Factory function to create appropriate alerter based on configuration.

    Returns MultiChannelAlerter if a desktop command, email or Teams is
    available, otherwise returns ConsoleAlerter.
    """
    channels: dict[str, BaseAlerter] = {}
    if enable_console:
        channels["console"] = ConsoleAlerter()

    desktop = DesktopAlerter()
    if desktop.is_configured():
        channels["desktop"] = desktop
        logger.info(f"Desktop notifications via {desktop.command}")

    if config.is_email_configured():
        channels["email"] = EmailAlerter()
        logger.info(f"Email configured for {len(config.ALERT_EMAIL_TO)} recipient(s)")

    if config.is_teams_configured():
        channels["teams"] = TeamsAlerter()
        logger.info("Teams webhook configured")

    if list(channels) == ["console"]:
        logger.info("No desktop, email, or Teams configured - using console alerter only")
        return channels["console"]
    if not channels:
        logger.warning("No alert channels available - falling back to console")
        return ConsoleAlerter()

    return MultiChannelAlerter(channels)
