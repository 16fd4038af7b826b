"""
Alert frequency reporting: query building, event aggregation and formatting.

AlertFrequencyReporter: import from herald.alerts.alert_frequency.
"""

from .aggregator import aggregate_events
from .formatter import format_period, format_report
from .models import FrequencyReport, RawEvent, SearchFailure, SearchResult, StateCount
from .query_builder import build_alert_query, build_search_parameters

__all__ = [
    'aggregate_events',
    'build_alert_query',
    'build_search_parameters',
    'format_period',
    'format_report',
    'FrequencyReport',
    'RawEvent',
    'SearchFailure',
    'SearchResult',
    'StateCount',
]
