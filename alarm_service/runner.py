"""Command line client and daemon launcher for the alarm service.

Example uses:
  alarm -n -t "20:15" -m "Meet and greet with John in 15 minutes"
  alarm -n -r -t "friday" -m "Friday beer-drinking competition tonight"
  alarm -c -i 2 -t "thursday" -m "Thursday beer-drinking competition tonight"

Start with --daemon in your desktop session to get the alerts.
"""

import argparse
import logging
import sys

from .alert_store import AlertStore
from .alerters import create_alerter_from_config
from .config import config
from .exceptions import AlarmError, ValidationError
from .models import AlertMode, AlertRecord
from .monitor import AlarmMonitor, run_daemon
from .operations import change_alert, delete_alert, list_alerts, new_alert
from .timespec import display_timestamp

logger = logging.getLogger(__name__)

LIST_HEADER = " id | m |                 date | message"
LIST_RULE = "----+---+----------------------+" + "-" * 45


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def format_row(record: AlertRecord) -> str:
    """Format one alert as a row of the list table."""
    if record.mode == AlertMode.ONE_SHOT:
        mode = " "
        when = display_timestamp(record.when)
    else:
        mode = "r"
        when = record.when
    return f"{record.id:>3} | {mode} | {when:>20} | {record.message}"


def format_table(records: list[AlertRecord]) -> str:
    """Format alerts as the list table."""
    return "\n".join([LIST_HEADER, LIST_RULE] + [format_row(r) for r in records])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alarm",
        description="Alert service client and daemon.",
    )

    # Actions
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "-n", "--new",
        dest="action", action="store_const", const="new",
        help="Create a new alert at timespec (-t, -m)",
    )
    actions.add_argument(
        "-c", "--change",
        dest="action", action="store_const", const="change",
        help="Change the alert identified by id (-i, -t, -m)",
    )
    actions.add_argument(
        "-d", "--delete",
        dest="action", action="store_const", const="delete",
        help="Delete the alert identified by id (-i)",
    )
    actions.add_argument(
        "-l", "--list",
        dest="action", action="store_const", const="list",
        help="List alert(s) ([-i])",
    )
    actions.add_argument(
        "--daemon",
        dest="action", action="store_const", const="daemon",
        help="Start the alert daemon",
    )

    # Parameters
    parser.add_argument(
        "-t", "--timespec",
        help="Date/time specification at which the alert should be triggered",
    )
    parser.add_argument(
        "-m", "--message",
        help="Message that should be displayed",
    )
    parser.add_argument(
        "-i", "--id",
        type=int,
        dest="alert_id",
        help="Alert ID that should be changed, deleted or listed",
    )
    parser.add_argument(
        "-f", "--file",
        help=f"Use FILE as alarm file instead of the default {config.ALARM_FILE}",
    )
    parser.add_argument(
        "-r", "--repeat",
        action="store_true",
        help="Recurring alert (timespec like 'friday 18:00' or 'daily 7:30am')",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="With --change, fail if the alert does not exist instead of creating it",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help=f"Daemon poll interval in seconds (default: {config.POLL_INTERVAL})",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="With --daemon, run a single poll and exit",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.action is None:
        parser.print_help()
        return 0

    store = AlertStore(args.file)

    try:
        if args.action == "new":
            alert_id = new_alert(
                store, args.timespec, args.message,
                repeat=args.repeat, alert_id=args.alert_id,
            )
            print(f"New alert added (ID {alert_id})")

        elif args.action == "change":
            alert_id = change_alert(
                store, args.alert_id, args.timespec, args.message,
                repeat=args.repeat, strict=args.strict,
            )
            print(f"Changed alert (ID {alert_id})")

        elif args.action == "delete":
            if delete_alert(store, args.alert_id):
                print(f"Deleted alert (ID {args.alert_id})")
            else:
                print(f"No alert with ID {args.alert_id}")

        elif args.action == "list":
            print(format_table(list_alerts(store, args.alert_id)))

        elif args.action == "daemon":
            if args.once:
                monitor = AlarmMonitor(
                    store=store,
                    alerter=create_alerter_from_config(),
                    poll_interval=args.interval,
                )
                monitor.run_once()
            else:
                run_daemon(store.path, args.interval, create_alerter_from_config())

    except ValidationError as e:
        print(e, file=sys.stderr)
        return 1
    except AlarmError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
