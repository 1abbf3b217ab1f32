"""Alarm daemon.

Polls the alarm file at a fixed interval, shows every alert whose time has
come and removes one-shot alerts once they have been shown.
"""

import logging
import signal
import time
from datetime import datetime, timedelta
from pathlib import Path

from .alert_store import AlertStore
from .alerters import BaseAlerter, create_alerter_from_config
from .config import config
from .exceptions import AlarmError, StoreIOError
from .models import AlertRecord, MonitorState
from .reconciler import decide

logger = logging.getLogger(__name__)


def render_message(record: AlertRecord) -> str:
    """Text shown to the user when an alert fires."""
    return record.message


class AlarmMonitor:
    """Polls the alarm file and fires due alerts."""

    def __init__(
        self,
        store: AlertStore | None = None,
        alerter: BaseAlerter | None = None,
        poll_interval: int | None = None,
    ):
        self.store = store or AlertStore()
        self.alerter = alerter or create_alerter_from_config()
        self.poll_interval = poll_interval or config.POLL_INTERVAL
        self.state = MonitorState.STOPPED
        self.last_poll: datetime | None = None

    def _poll_window(self, now: datetime) -> timedelta:
        """
        Span of time this poll is responsible for.

        Normally one poll interval. When the previous poll ran a little more
        than one interval ago the window stretches back to it, so a minute
        is never lost to sleep overrun. After longer gaps (e.g. the machine
        was suspended) missed recurring occurrences are not replayed.
        """
        window = timedelta(seconds=self.poll_interval)
        if self.last_poll is not None:
            elapsed = now - self.last_poll
            if window < elapsed < window * 2:
                return elapsed
        return window

    def _load(self) -> list[AlertRecord]:
        try:
            return self.store.load()
        except StoreIOError as e:
            logger.error(f"Cannot read alarm file, treating it as empty: {e}")
            return []

    def run_once(self, now: datetime | None = None) -> int:
        """
        Run a single poll cycle.

        Returns the number of alerts fired.
        """
        now = now or datetime.now()
        window = self._poll_window(now)
        self.last_poll = now

        records = self._load()
        decision = decide(now, records, window)

        for record, reason in decision.invalid:
            logger.warning(f"Skipping alert {record.id}: {reason}")

        for record in decision.to_fire:
            logger.info(f"Firing alert {record.id}: {record.message}")
            try:
                if not self.alerter.notify(render_message(record)):
                    logger.warning(f"Alert {record.id} was not delivered")
            except Exception as e:
                logger.exception(f"Error notifying alert {record.id}: {e}")

        # Deletions only after every fire of this poll was dispatched
        for alert_id in decision.to_delete:
            try:
                if self.store.remove_by_id(alert_id):
                    logger.info(f"Removed one-shot alert {alert_id}")
            except AlarmError as e:
                logger.error(f"Failed to remove fired alert {alert_id}: {e}")

        if decision.to_fire:
            logger.info(f"Fired {len(decision.to_fire)} alert(s)")
        else:
            logger.debug(f"No alerts due ({len(records)} stored)")

        return len(decision.to_fire)

    def run_continuous(self) -> None:
        """Run the polling loop until interrupted."""
        logger.info("Alarm daemon starting")
        logger.info(f"  Alarm file:    {self.store.path}")
        logger.info(f"  Poll interval: {self.poll_interval} seconds")

        self.state = MonitorState.RUNNING
        try:
            while True:
                try:
                    self.run_once()
                except Exception as e:
                    logger.exception(f"Error during poll cycle: {e}")

                time.sleep(self.poll_interval)
        except KeyboardInterrupt:
            logger.info("Alarm daemon stopped")
        finally:
            self.state = MonitorState.STOPPED
            logger.info(f"Total alerts fired: {self.alerter.get_alert_count()}")


def _stop_on_sigterm(signum, frame):
    raise KeyboardInterrupt


def run_daemon(
    store_path: str | Path | None = None,
    poll_interval: int | None = None,
    alerter: BaseAlerter | None = None,
) -> None:
    """Start the alarm daemon; blocks until SIGINT or SIGTERM."""
    monitor = AlarmMonitor(
        store=AlertStore(store_path),
        alerter=alerter,
        poll_interval=poll_interval,
    )
    signal.signal(signal.SIGTERM, _stop_on_sigterm)
    monitor.run_continuous()
