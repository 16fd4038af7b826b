"""
AlertFrequencyReporter - how often has this alert fired recently?

Searches Splunk for previous occurrences of a Nagios alert and summarizes
them for inclusion in the alert notification.

Handles host alerts (DOWN state) and service alerts for a single host
(e.g. 'Disk Space' is CRITICAL). Without a service name, a host alert search
is performed.

Options:
    duration    - time (in days) to search [DEFAULT: 7]
    max_results - cap on returned rows [DEFAULT: 10000]
    latest_time - end of the search window [DEFAULT: 'now']

A missing frequency summary must never block the alert itself: backend
rejections and malformed responses yield None, and transport failures do too
unless the reporter is asked to raise them.

Usage:
    reporter = AlertFrequencyReporter.from_env()
    summary = reporter.report('web0200.ny4', 'Disk Space', duration=7)
    if summary:
        add_text('alert_frequency', summary)
"""

import logging
from typing import Any, Optional

from herald.alerts.aggregator import aggregate_events
from herald.alerts.formatter import format_period, format_report
from herald.alerts.models import (
    DEFAULT_DURATION_DAYS,
    DEFAULT_LATEST_TIME,
    DEFAULT_MAX_RESULTS,
    FrequencyReport,
    SearchOptions,
)
from herald.alerts.query_builder import build_alert_query, build_search_parameters
from herald.clients.splunk_client import SplunkSearchClient
from herald.config.splunk_config import SplunkConfig
from herald.config.timeout_config import SearchTimeoutConfig
from herald.exceptions import TransportError
from herald.utils.structured_logging import (
    clear_logging_context,
    get_logging_context,
    log_search_transport_error,
    set_logging_context,
)

logger = logging.getLogger(__name__)


class AlertFrequencyReporter:
    """
    Builds the query, runs the search, aggregates and formats.

    Args:
        client: Search client to use
        raise_on_transport_error: Re-raise TransportError instead of
            returning None
    """

    def __init__(
        self,
        client: SplunkSearchClient,
        raise_on_transport_error: bool = False
    ):
        self.client = client
        self.raise_on_transport_error = raise_on_transport_error

    @classmethod
    def from_config(
        cls,
        config: SplunkConfig,
        timeouts: Optional[SearchTimeoutConfig] = None,
        **kwargs
    ) -> 'AlertFrequencyReporter':
        return cls(SplunkSearchClient(config, timeouts), **kwargs)

    @classmethod
    def from_env(cls, **kwargs) -> 'AlertFrequencyReporter':
        """
        Reporter configured from SPLUNK_* environment variables.

        Raises:
            ConfigurationError: If the endpoint or credentials are missing
        """
        return cls.from_config(SplunkConfig.from_env(), **kwargs)

    def get_alert_frequency(
        self,
        hostname: str,
        service: Optional[str] = None,
        duration: Any = None,
        max_results: Optional[int] = None,
        latest_time: Optional[str] = None
    ) -> Optional[FrequencyReport]:
        """
        Query Splunk to determine how frequently an alert fired in a period.

        Args:
            hostname: Alerting host (required)
            service: Optional alerting service
            duration: Days to look back (default: 7)
            max_results: Maximum rows to fetch (default: 10000)
            latest_time: End of window (default: 'now')

        Returns:
            FrequencyReport, or None if no data could be obtained

        Raises:
            ValueError: If hostname is empty
            TransportError: Only when raise_on_transport_error is set
        """
        options = SearchOptions(
            duration=DEFAULT_DURATION_DAYS if duration is None else duration,
            max_results=DEFAULT_MAX_RESULTS if max_results is None else max_results,
            latest_time=latest_time or DEFAULT_LATEST_TIME,
        )

        query = build_alert_query(hostname, service, index=self.client.config.index)
        params = build_search_parameters(query, options)

        # Search log events for this lookup carry the alert identity
        previous_context = get_logging_context()
        set_logging_context(hostname=hostname, service=service)
        try:
            result = self.client.search(params)
        except TransportError as e:
            log_search_transport_error(e.host, e.reason)
            if self.raise_on_transport_error:
                raise
            return None
        finally:
            clear_logging_context()
            set_logging_context(**previous_context)

        if not result.ok:
            logger.info(
                f"No alert history for {hostname}"
                f"{'/' + service if service else ''}: {result.failure.value}"
            )
            return None

        counts = aggregate_events(result.events)
        report = FrequencyReport(
            period=format_period(options.duration),
            hostname=hostname,
            service=service,
            counts=counts,
            duration=options.duration,
        )
        logger.debug(
            f"{report.total} distinct alerts from {len(result.events)} rows "
            f"for {hostname} in the last {report.period}"
        )
        return report

    def report(self, hostname: str, service: Optional[str] = None, **options) -> Optional[str]:
        """Frequency summary sentence, or None when there is no data."""
        frequency = self.get_alert_frequency(hostname, service, **options)
        if frequency is None:
            return None
        return format_report(frequency)
