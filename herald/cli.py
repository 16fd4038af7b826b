#!/usr/bin/env python3
"""
alert-frequency - how often has a Nagios alert fired recently?

Exit codes
----------
0  Report printed
1  No data (backend rejected the search or returned an unusable body)
2  Configuration error (SPLUNK_URL / SPLUNK_USERNAME / SPLUNK_PASSWORD)
3  Transport error (only with --strict; otherwise reported as no data)

Usage
-----
# host alerts over the last 7 days
alert-frequency web0200.ny4

# service alerts over the last day
alert-frequency web0200.ny4 --service 'Disk Space' --duration 1
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

from herald.alerts.alert_frequency import AlertFrequencyReporter
from herald.alerts.models import DEFAULT_DURATION_DAYS, DEFAULT_LATEST_TIME, DEFAULT_MAX_RESULTS
from herald.exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DATA = 1
EXIT_CONFIG_ERROR = 2
EXIT_TRANSPORT_ERROR = 3


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Report how often a Nagios alert fired recently')
    parser.add_argument('hostname', help='Alerting host (e.g. web0200.ny4)')
    parser.add_argument('--service', help="Alerting service (e.g. 'Disk Space'); omit for host alerts")
    parser.add_argument('--duration', type=int, default=DEFAULT_DURATION_DAYS, help='Days to search')
    parser.add_argument('--max-results', type=int, default=DEFAULT_MAX_RESULTS, help='Maximum rows to fetch')
    parser.add_argument('--latest-time', default=DEFAULT_LATEST_TIME, help="End of search window (default: now); pass relative times as --latest-time=-1h")
    parser.add_argument('--strict', action='store_true', help='Fail on transport errors instead of reporting no data')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    load_dotenv()  # quietly no-ops if file missing

    try:
        reporter = AlertFrequencyReporter.from_env(raise_on_transport_error=args.strict)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    try:
        summary = reporter.report(
            args.hostname,
            args.service,
            duration=args.duration,
            max_results=args.max_results,
            latest_time=args.latest_time,
        )
    except TransportError as e:
        print(f"alert-frequency: {e}", file=sys.stderr)
        return EXIT_TRANSPORT_ERROR

    if summary is None:
        print("alert-frequency: no data", file=sys.stderr)
        return EXIT_NO_DATA

    print(summary)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
