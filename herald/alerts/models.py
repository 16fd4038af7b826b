"""
Alert Frequency Data Model

Records passed between the stages of the alert-frequency pipeline:

    SearchQuery -> SearchParameters -> SearchResult[RawEvent] -> StateCount list -> FrequencyReport

Everything here is created fresh for a single invocation and thrown away once
the summary sentence is rendered.

The eight-field event schema (FIELDS) is shared by the query projection and
the dedup key. Change it in one place only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple


# Order matters: the search projection and RawEvent.dedup_key both follow it
FIELDS: Tuple[str, ...] = (
    'hostname',
    'service_name',
    'state',
    'date_year',
    'date_month',
    'date_mday',
    'date_hour',
    'date_minute',
)

DEDUP_KEY_DELIMITER = '-'

DEFAULT_INDEX = 'nagios'
DEFAULT_DURATION_DAYS = 7
DEFAULT_MAX_RESULTS = 10000
DEFAULT_LATEST_TIME = 'now'

HOST_ALERT_STATES: Tuple[str, ...] = ('DOWN',)
SERVICE_ALERT_STATES: Tuple[str, ...] = ('WARNING', 'CRITICAL', 'UNKNOWN', 'DOWN')


class SearchFailure(Enum):
    """Soft failure shapes returned by the search client."""
    BACKEND_REJECTION = "BACKEND_REJECTION"    # non-200 status
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"  # 200 with an unusable body


@dataclass(frozen=True)
class SearchQuery:
    """A search for one host (and optionally one service) in the alert index."""
    hostname: str
    service: Optional[str]
    state_filter: str
    projected_fields: Tuple[str, ...] = FIELDS
    index: str = DEFAULT_INDEX

    def render(self) -> str:
        query = f'search index={self.index} hostname="{self.hostname}"'
        if self.service is not None:
            query += f' service_name="{self.service}"'
        query += f' {self.state_filter}'
        query += f' | fields {",".join(self.projected_fields)}'
        return query

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class SearchOptions:
    """Caller-supplied knobs for one frequency lookup."""
    duration: Any = DEFAULT_DURATION_DAYS
    max_results: int = DEFAULT_MAX_RESULTS
    latest_time: str = DEFAULT_LATEST_TIME


@dataclass(frozen=True)
class SearchParameters:
    """Oneshot search request parameters."""
    search: str
    earliest: str
    latest: str = DEFAULT_LATEST_TIME
    max_results: int = DEFAULT_MAX_RESULTS
    exec_mode: str = 'oneshot'
    output_format: str = 'json'

    def as_form_data(self) -> dict:
        """Form fields for the search endpoint POST body."""
        return {
            'exec_mode': self.exec_mode,
            'earliest_time': self.earliest,
            'latest_time': self.latest,
            'output_mode': self.output_format,
            'count': self.max_results,
            'search': self.search,
        }


def _field_value(value: Any) -> str:
    if value is None:
        return ''
    return str(value)


@dataclass(frozen=True)
class RawEvent:
    """
    One alert log row, restricted to the eight projected fields.

    Missing fields are stored as empty strings so every row can still
    produce a dedup key.
    """
    hostname: str = ''
    service_name: str = ''
    state: str = ''
    date_year: str = ''
    date_month: str = ''
    date_mday: str = ''
    date_hour: str = ''
    date_minute: str = ''

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> 'RawEvent':
        return cls(**{name: _field_value(row.get(name)) for name in FIELDS})

    @property
    def dedup_key(self) -> str:
        """Minute-granularity identity of the alert occurrence."""
        return DEDUP_KEY_DELIMITER.join(getattr(self, name) for name in FIELDS)


class StateCount(NamedTuple):
    state: str
    count: int


AggregatedCounts = List[StateCount]


@dataclass(frozen=True)
class FrequencyReport:
    """Per-state occurrence counts for one host/service over a time window."""
    period: str
    hostname: str
    counts: AggregatedCounts
    service: Optional[str] = None
    duration: Any = DEFAULT_DURATION_DAYS

    @property
    def total(self) -> int:
        return sum(c.count for c in self.counts)


@dataclass
class SearchResult:
    """
    Outcome of a single search call.

    Either ``events`` is populated (possibly empty) or ``failure`` names the
    soft failure. Transport failures are raised, not returned.
    """
    events: Optional[List[RawEvent]] = None
    failure: Optional[SearchFailure] = None
    status_code: Optional[int] = None
    detail: str = ''

    @property
    def ok(self) -> bool:
        return self.failure is None and self.events is not None

    @classmethod
    def success(cls, events: List[RawEvent], status_code: int = 200) -> 'SearchResult':
        return cls(events=events, status_code=status_code)

    @classmethod
    def rejected(cls, status_code: int, detail: str = '') -> 'SearchResult':
        return cls(failure=SearchFailure.BACKEND_REJECTION, status_code=status_code, detail=detail)

    @classmethod
    def malformed(cls, detail: str, status_code: int = 200) -> 'SearchResult':
        return cls(failure=SearchFailure.MALFORMED_RESPONSE, status_code=status_code, detail=detail)
