"""Email alerter using SMTP."""

import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import datetime
from email.mime.text import MIMEText

from .base import BaseAlerter
from ..config import config

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    """Email message content."""
    subject: str
    text_body: str


class EmailAlerter(BaseAlerter):
    """Send alerts by email via SMTP."""

    def __init__(
        self,
        smtp_server: str | None = None,
        smtp_port: int | None = None,
        smtp_username: str | None = None,
        smtp_password: str | None = None,
        from_address: str | None = None,
        to_addresses: list[str] | None = None,
        use_tls: bool = True,
        timeout: float = 10,
    ):
        """
        Initialize email alerter.

        Args:
            smtp_server: SMTP server hostname
            smtp_port: SMTP server port (587 for TLS, 465 for SSL, 25 for plain)
            smtp_username: SMTP authentication username
            smtp_password: SMTP authentication password
            from_address: Sender email address
            to_addresses: List of recipient email addresses
            use_tls: Whether to use STARTTLS (for port 587)
            timeout: Socket timeout in seconds
        """
        self.smtp_server = smtp_server or config.SMTP_SERVER
        self.smtp_port = smtp_port or config.SMTP_PORT
        self.smtp_username = smtp_username or config.SMTP_USERNAME
        self.smtp_password = smtp_password or config.SMTP_PASSWORD
        self.from_address = (
            from_address or config.ALERT_EMAIL_FROM or f"alarms@{self.smtp_server}"
        )
        self.to_addresses = to_addresses or config.ALERT_EMAIL_TO
        self.use_tls = use_tls
        self.timeout = timeout

        self.alert_count = 0

    def is_configured(self) -> bool:
        """Check if email alerter is properly configured."""
        return bool(self.smtp_server and self.to_addresses)

    def _format_message(self, message: str) -> EmailMessage:
        """Build subject and bodies for an alert."""
        subject_text = message if len(message) <= 60 else message[:57] + "..."
        sent = datetime.now().strftime("%d %b %Y %H:%M")
        return EmailMessage(
            subject=f"[Alarm] {subject_text}",
            text_body=f"Alarm at {sent}\n\n{message}\n",
        )

    def send(self, message: EmailMessage) -> bool:
        """
        Send an email to the configured recipients.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.to_addresses:
            logger.warning("Email: No recipient addresses configured")
            return False

        msg = MIMEText(message.text_body, "plain", "utf-8")
        msg["Subject"] = message.subject
        msg["From"] = self.from_address
        msg["To"] = ", ".join(self.to_addresses)

        try:
            if self.smtp_port == 465:
                # SSL connection
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    self.smtp_server, self.smtp_port, context=context, timeout=self.timeout
                ) as server:
                    if self.smtp_username and self.smtp_password:
                        server.login(self.smtp_username, self.smtp_password)
                    server.sendmail(self.from_address, self.to_addresses, msg.as_string())
            else:
                # Plain or STARTTLS connection
                with smtplib.SMTP(self.smtp_server, self.smtp_port, timeout=self.timeout) as server:
                    if self.use_tls:
                        server.starttls()
                    if self.smtp_username and self.smtp_password:
                        server.login(self.smtp_username, self.smtp_password)
                    server.sendmail(self.from_address, self.to_addresses, msg.as_string())

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email failed: {e}")
            return False

        logger.info(f"Email sent to {len(self.to_addresses)} recipient(s)")
        return True

    def notify(self, message: str) -> bool:
        """Send an alert email."""
        if not self.is_configured():
            logger.warning("Email alerter not configured")
            return False

        if self.send(self._format_message(message)):
            self.alert_count += 1
            return True
        return False

    def get_alert_count(self) -> int:
        """Return number of alerts sent."""
        return self.alert_count
