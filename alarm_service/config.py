"""Configuration management for the alarm service."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    # Fall back to template for defaults
    template_path = Path(__file__).parent.parent / ".env.template"
    if template_path.exists():
        load_dotenv(template_path)


class Config:
    """Application configuration."""

    # Alarm file settings
    ALARM_FILE: str = os.path.expanduser(os.getenv("ALARM_FILE", "~/.alarms"))

    # Polling settings
    POLL_INTERVAL: int = int(os.getenv("ALARM_POLL_INTERVAL", "60"))

    # Desktop notification command (auto-detected when unset)
    NOTIFY_COMMAND: str | None = os.getenv("ALARM_NOTIFY_COMMAND")

    # Email settings
    SMTP_SERVER: str | None = os.getenv("SMTP_SERVER")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")
    ALERT_EMAIL_FROM: str | None = os.getenv("ALERT_EMAIL_FROM")
    ALERT_EMAIL_TO: list[str] = [
        e.strip() for e in os.getenv("ALERT_EMAIL_TO", "").split(",") if e.strip()
    ]

    # Teams webhook settings
    TEAMS_WEBHOOK_URL: str | None = os.getenv("TEAMS_WEBHOOK_URL")

    @classmethod
    def is_email_configured(cls) -> bool:
        """Check if SMTP delivery is configured."""
        return bool(cls.SMTP_SERVER and cls.ALERT_EMAIL_TO)

    @classmethod
    def is_teams_configured(cls) -> bool:
        """Check if a Teams webhook is configured."""
        return bool(cls.TEAMS_WEBHOOK_URL)


config = Config()
