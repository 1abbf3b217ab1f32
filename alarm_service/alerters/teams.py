"""Microsoft Teams alerter (Workflows / Power Automate webhook).

Setup:
1. In Teams channel, click ... > Workflows
2. Search "Post to a channel when a webhook request is received"
3. Select team/channel and create
4. Copy the webhook URL into TEAMS_WEBHOOK_URL
"""

import logging
from datetime import datetime

import requests

from .base import BaseAlerter
from ..config import config

logger = logging.getLogger(__name__)


class TeamsAlerter(BaseAlerter):
    """Posts alerts to a Microsoft Teams channel."""

    def __init__(self, webhook_url: str | None = None, timeout: float = 10):
        """Initialize Teams alerter.

        Args:
            webhook_url: Teams webhook URL. Uses config if None.
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url or config.TEAMS_WEBHOOK_URL
        self.timeout = timeout
        self.alert_count = 0

    def is_configured(self) -> bool:
        """Check if Teams webhook is configured."""
        return bool(self.webhook_url)

    def _build_card(self, message: str) -> dict:
        """Build an adaptive card wrapped for the Workflows webhook."""
        body = [
            {
                "type": "TextBlock",
                "text": "Alarm",
                "weight": "Bolder",
                "size": "Large",
                "color": "Attention",
                "wrap": True,
            },
            {
                "type": "TextBlock",
                "text": message,
                "wrap": True,
            },
            {
                "type": "TextBlock",
                "text": f"Sent: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
                "size": "Small",
                "isSubtle": True,
                "wrap": True,
            },
        ]

        return {
            "type": "message",
            "attachments": [
                {
                    "contentType": "application/vnd.microsoft.card.adaptive",
                    "contentUrl": None,
                    "content": {
                        "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                        "type": "AdaptiveCard",
                        "version": "1.4",
                        "body": body,
                    },
                }
            ],
        }

    def notify(self, message: str) -> bool:
        """Send an adaptive card to Teams."""
        if not self.is_configured():
            logger.warning("Teams webhook not configured")
            return False

        try:
            response = requests.post(
                self.webhook_url,
                json=self._build_card(message),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to send Teams notification: {e}")
            return False

        self.alert_count += 1
        logger.info("Teams notification sent successfully")
        return True

    def get_alert_count(self) -> int:
        """Return number of alerts sent."""
        return self.alert_count
