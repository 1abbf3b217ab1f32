"""Base alerter interface."""

from abc import ABC, abstractmethod


class BaseAlerter(ABC):
    """Abstract base class for alerters."""

    @abstractmethod
    def notify(self, message: str) -> bool:
        """
        Show an alert message to the user.

        Best effort: implementations should return promptly and report
        failure by returning False rather than raising.

        Args:
            message: The text to display

        Returns:
            True if the alert was delivered, False otherwise
        """
        pass

    @abstractmethod
    def get_alert_count(self) -> int:
        """Return the number of alerts sent."""
        pass
