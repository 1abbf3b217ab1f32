"""Tests for the alarm daemon."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

from alarm_service.alert_store import AlertStore
from alarm_service.models import MonitorState
from alarm_service.monitor import AlarmMonitor, run_daemon


def make_monitor(store, alerter, interval=60):
    return AlarmMonitor(store=store, alerter=alerter, poll_interval=interval)


class TestRunOnce:
    """Tests for a single poll cycle."""

    def test_overdue_one_shot_fires_and_is_removed(self, store, write_alarms, recorder, alarm_file):
        """Test an alert missed while the daemon was down fires and leaves an empty store."""
        write_alarms("3|n|2023-01-01 00:00|old")
        monitor = make_monitor(store, recorder)

        fired = monitor.run_once(now=datetime(2023, 6, 1, 9, 0))

        assert fired == 1
        assert recorder.messages == ["old"]
        assert store.load() == []
        assert alarm_file.read_text() == ""

    def test_future_alert_untouched(self, store, write_alarms, recorder, alarm_file):
        write_alarms("1|n|2024-01-01 10:00|later")
        before = alarm_file.read_bytes()

        fired = make_monitor(store, recorder).run_once(now=datetime(2024, 1, 1, 9, 0))

        assert fired == 0
        assert recorder.messages == []
        assert alarm_file.read_bytes() == before

    def test_recurring_fires_and_stays(self, store, write_alarms, recorder):
        write_alarms("2|r|fri 18:00|Friday beer-drinking competition tonight")

        make_monitor(store, recorder).run_once(now=datetime(2024, 1, 5, 18, 0, 10))

        assert recorder.messages == ["Friday beer-drinking competition tonight"]
        assert [r.id for r in store.load()] == [2]

    def test_failed_notification_does_not_block_others(self, store, write_alarms, make_recorder):
        """Test one alerter failure neither stops other fires nor the deletions."""
        write_alarms(
            "1|n|2024-01-01 09:00|broken",
            "2|n|2024-01-01 09:30|fine",
            "3|n|2024-01-02 09:00|tomorrow",
        )
        alerter = make_recorder(fail_on={"broken"})

        fired = make_monitor(store, alerter).run_once(now=datetime(2024, 1, 1, 10, 0))

        assert fired == 2
        assert alerter.messages == ["broken", "fine"]
        assert [r.id for r in store.load()] == [3]

    def test_undelivered_alert_still_removed(self, store, write_alarms, make_recorder):
        write_alarms("1|n|2024-01-01 09:00|nobody listening")
        alerter = make_recorder(deliver=False)

        make_monitor(store, alerter).run_once(now=datetime(2024, 1, 1, 10, 0))

        assert store.load() == []

    def test_unreadable_store_is_empty(self, tmp_path, recorder):
        """Test a poll against an unreadable file fires nothing and does not raise."""
        directory = tmp_path / "not_a_file"
        directory.mkdir()

        fired = make_monitor(AlertStore(directory), recorder).run_once(now=datetime(2024, 1, 1))

        assert fired == 0
        assert recorder.messages == []

    def test_malformed_and_invalid_lines_kept(self, store, write_alarms, recorder, alarm_file):
        """Test bad lines neither fire nor get lost when fired alerts are removed."""
        write_alarms(
            "not an alert",
            "1|n|2024-01-01 09:00|due",
            "2|r|every blue moon|never",
        )

        make_monitor(store, recorder).run_once(now=datetime(2024, 1, 1, 10, 0))

        assert recorder.messages == ["due"]
        assert alarm_file.read_text() == "not an alert\n2|r|every blue moon|never\n"

    def test_invalid_utf8_line_does_not_block_others(self, store, alarm_file, recorder):
        """Test one line with broken encoding does not stop the other alerts."""
        alarm_file.write_bytes(
            b"1|n|2023-01-01 00:00|ok\n"
            b"2|n|2023-01-01 00:00|bad\xff\n"
        )

        fired = make_monitor(store, recorder).run_once(now=datetime(2023, 6, 1))

        assert fired == 1
        assert recorder.messages == ["ok"]
        assert alarm_file.read_bytes() == b"2|n|2023-01-01 00:00|bad\xff\n"

    def test_alert_added_between_polls(self, store, write_alarms, recorder):
        """Test the file is re-read on every poll."""
        monitor = make_monitor(store, recorder)
        monitor.run_once(now=datetime(2024, 1, 1, 10, 0))

        write_alarms("1|n|2024-01-01 10:00|new")
        monitor.run_once(now=datetime(2024, 1, 1, 10, 1))

        assert recorder.messages == ["new"]


class TestPollWindow:
    """Tests for recurring alerts across consecutive polls."""

    def test_consecutive_polls_fire_once(self, store, write_alarms, recorder):
        write_alarms("1|r|fri 18:00|beer")
        monitor = make_monitor(store, recorder)
        now = datetime(2024, 1, 5, 17, 58, 30)

        for _ in range(5):
            monitor.run_once(now=now)
            now += timedelta(seconds=60)

        assert recorder.messages == ["beer"]

    def test_sleep_overrun_does_not_skip_occurrence(self, store, write_alarms, recorder):
        """Test a poll that runs slightly late still covers the minute since the last one."""
        write_alarms("1|r|fri 18:00|beer")
        monitor = make_monitor(store, recorder)

        monitor.run_once(now=datetime(2024, 1, 5, 17, 59, 59, 500000))
        monitor.run_once(now=datetime(2024, 1, 5, 18, 1, 0, 500000))

        assert recorder.messages == ["beer"]

    def test_long_gap_does_not_replay(self, store, write_alarms, recorder):
        """Test occurrences missed during a long gap are not replayed."""
        write_alarms("1|r|daily 10:00|standup")
        monitor = make_monitor(store, recorder)

        monitor.run_once(now=datetime(2024, 1, 1, 9, 0))
        monitor.run_once(now=datetime(2024, 1, 1, 12, 0))

        assert recorder.messages == []
        assert monitor._poll_window(datetime(2024, 1, 1, 12, 1)) == timedelta(seconds=60)

    def test_first_poll_uses_interval(self, store, recorder):
        monitor = make_monitor(store, recorder, interval=30)

        assert monitor._poll_window(datetime(2024, 1, 1)) == timedelta(seconds=30)


class TestRunContinuous:
    """Tests for the polling loop."""

    def test_stops_on_interrupt(self, store, recorder):
        """Test Ctrl+C ends the loop and leaves the monitor stopped."""
        monitor = make_monitor(store, recorder)
        states = []

        def poll(now=None):
            states.append(monitor.state)
            return 0

        monitor.run_once = MagicMock(side_effect=poll)

        with patch("alarm_service.monitor.time.sleep", side_effect=[None, KeyboardInterrupt]) as sleep:
            monitor.run_continuous()

        assert monitor.run_once.call_count == 2
        assert states == [MonitorState.RUNNING, MonitorState.RUNNING]
        assert monitor.state == MonitorState.STOPPED
        sleep.assert_called_with(60)

    def test_poll_error_does_not_stop_loop(self, store, recorder):
        monitor = make_monitor(store, recorder)
        monitor.run_once = MagicMock(side_effect=[RuntimeError("boom"), 0])

        with patch("alarm_service.monitor.time.sleep", side_effect=[None, KeyboardInterrupt]):
            monitor.run_continuous()

        assert monitor.run_once.call_count == 2
        assert monitor.state == MonitorState.STOPPED


class TestRunDaemon:

    def test_builds_monitor_for_file(self, alarm_file, recorder):
        with patch("alarm_service.monitor.signal.signal") as install, \
                patch.object(AlarmMonitor, "run_continuous", autospec=True) as run:
            run_daemon(alarm_file, poll_interval=5, alerter=recorder)

        monitor = run.call_args[0][0]
        assert monitor.store.path == alarm_file
        assert monitor.poll_interval == 5
        assert monitor.alerter is recorder
        install.assert_called_once()
