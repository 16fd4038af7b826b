"""
Splunk query construction for alert history searches.

Host alerts (no service) search for DOWN rows; service alerts search for any
non-OK state of that service on that host.

Hostnames and service names are substituted literally. They come from the
monitoring configuration, never from untrusted input.
"""

from typing import Optional

from herald.alerts.models import (
    DEFAULT_INDEX,
    FIELDS,
    HOST_ALERT_STATES,
    SERVICE_ALERT_STATES,
    SearchOptions,
    SearchParameters,
    SearchQuery,
)


def _state_filter(states) -> str:
    clauses = [f'state="{state}"' for state in states]
    if len(clauses) == 1:
        return clauses[0]
    return f"({' OR '.join(clauses)})"


def build_alert_query(
    hostname: str,
    service: Optional[str] = None,
    index: str = DEFAULT_INDEX
) -> SearchQuery:
    """
    Build the alert history query for a host, or a service on that host.

    Args:
        hostname: Alerting host (e.g. 'web0200.ny4')
        service: Optional service name (e.g. 'Disk Space')
        index: Index holding the alert log rows

    Returns:
        SearchQuery projecting exactly the FIELDS schema

    Raises:
        ValueError: If hostname is empty
    """
    if not hostname or not hostname.strip():
        raise ValueError("hostname is required to build an alert query")

    states = HOST_ALERT_STATES if service is None else SERVICE_ALERT_STATES
    return SearchQuery(
        hostname=hostname,
        service=service,
        state_filter=_state_filter(states),
        projected_fields=FIELDS,
        index=index,
    )


def build_search_parameters(query: SearchQuery, options: Optional[SearchOptions] = None) -> SearchParameters:
    """Wrap a query with the oneshot time window and result cap."""
    options = options or SearchOptions()
    return SearchParameters(
        search=query.render(),
        earliest=f"-{options.duration}d",
        latest=options.latest_time,
        max_results=options.max_results,
    )
