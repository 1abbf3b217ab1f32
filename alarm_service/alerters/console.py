"""Console alerter for terminals and testing."""

from datetime import datetime
from .base import BaseAlerter


class ConsoleAlerter(BaseAlerter):
    """Prints alerts to the console."""

    def __init__(self):
        self.alert_count = 0
        self.alerts: list[dict] = []

    def notify(self, message: str) -> bool:
        """Print alert to console."""
        self.alert_count += 1

        now = datetime.now()
        self.alerts.append({
            "timestamp": now.isoformat(),
            "message": message,
        })

        print("\n" + "=" * 70)
        print(f"ALARM  {now.strftime('%d %b %Y %H:%M')}")
        print("=" * 70)
        print(f"  {message}")
        print("=" * 70 + "\n", flush=True)

        return True

    def get_alert_count(self) -> int:
        """Return number of alerts sent."""
        return self.alert_count

    def get_alerts(self) -> list[dict]:
        """Return all alerts sent (for testing)."""
        return self.alerts.copy()
