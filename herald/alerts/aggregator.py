"""
Alert event aggregation.

Nagios writes one log row per notified contact, so a single alert can show up
many times in the search results. Rows are collapsed on their dedup key (all
eight projected fields, minute granularity) before counting. Timestamps of
redundant rows can drift by a few seconds; dropping seconds from the key
absorbs that, except when an alert lands right on a minute boundary.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Set, Union

from herald.alerts.models import AggregatedCounts, RawEvent, StateCount

logger = logging.getLogger(__name__)


def _as_event(row: Union[RawEvent, Mapping[str, Any]]) -> RawEvent:
    if isinstance(row, RawEvent):
        return row
    return RawEvent.from_mapping(row)


def aggregate_events(events: Iterable[Union[RawEvent, Mapping[str, Any]]]) -> AggregatedCounts:
    """
    Count distinct alert occurrences per state.

    Args:
        events: RawEvent records (or plain row mappings)

    Returns:
        StateCount list sorted by count descending. States with equal counts
        keep the order in which they first appeared in the input.
    """
    # dicts keep insertion order, which gives first-seen order for ties
    keys_by_state: Dict[str, Set[str]] = {}
    total_rows = 0

    for row in events:
        event = _as_event(row)
        keys_by_state.setdefault(event.state, set()).add(event.dedup_key)
        total_rows += 1

    counts = [StateCount(state, len(keys)) for state, keys in keys_by_state.items()]
    counts.sort(key=lambda c: c.count, reverse=True)

    unique = sum(c.count for c in counts)
    if total_rows != unique:
        logger.debug(f"Collapsed {total_rows - unique} duplicate alert rows ({total_rows} -> {unique})")

    return counts
