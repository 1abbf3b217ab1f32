"""Desktop alerter that pops up a message through a local command."""

import logging
import shlex
import shutil
import subprocess

from .base import BaseAlerter
from ..config import config

logger = logging.getLogger(__name__)

# Tried in order when no command is configured
DEFAULT_COMMANDS = ("notify-send", "xmessage")


def detect_command() -> str | None:
    """Find the first available desktop notification command."""
    for command in DEFAULT_COMMANDS:
        if shutil.which(command):
            return command
    return None


class DesktopAlerter(BaseAlerter):
    """Show alerts with notify-send, xmessage or a configured command.

    The command is started in the background and not waited for, so a
    dialog left open does not hold up the daemon.
    """

    def __init__(self, command: str | None = None, title: str = "Alarm"):
        """
        Initialize desktop alerter.

        Args:
            command: Command line to run; the message is appended as the
                     last argument. Uses ALARM_NOTIFY_COMMAND or
                     auto-detection if None.
            title: Summary line passed to notify-send
        """
        command = command or config.NOTIFY_COMMAND or detect_command() or ""
        self.command = command.strip() or None
        self.title = title
        self.alert_count = 0

    def is_configured(self) -> bool:
        """Check if a usable notification command exists."""
        if not self.command:
            return False
        argv = shlex.split(self.command)
        return bool(argv) and shutil.which(argv[0]) is not None

    def _build_argv(self, message: str) -> list[str]:
        argv = shlex.split(self.command)
        if argv[0].endswith("notify-send"):
            return argv + [self.title, message]
        return argv + [message]

    def notify(self, message: str) -> bool:
        """Launch the notification command for this message."""
        if not self.command:
            logger.warning("No desktop notification command available")
            return False

        argv = self._build_argv(message)
        try:
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.error(f"Failed to run {argv[0]}: {e}")
            return False

        self.alert_count += 1
        logger.debug(f"Started {argv[0]} for alert")
        return True

    def get_alert_count(self) -> int:
        """Return number of alerts sent."""
        return self.alert_count
