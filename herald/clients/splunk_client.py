"""
Splunk Search Client

Runs one synchronous oneshot search against the Splunk REST API and returns
the alert rows.

Failure handling:
- Non-200 status            -> SearchResult with BACKEND_REJECTION (logged, no data)
- 200 with unusable body    -> SearchResult with MALFORMED_RESPONSE (logged, no data)
- Corrupt content encoding  -> SearchResult with MALFORMED_RESPONSE (logged, no data)
- DNS/connect/TLS/timeout   -> TransportError raised (as is any other requests failure)

Usage:
    from herald.clients.splunk_client import SplunkSearchClient

    client = SplunkSearchClient(SplunkConfig.from_env())
    result = client.search(params)
    if result.ok:
        rows = result.events
"""

import json
import logging
import time
from typing import Any, List, Optional

import requests

from herald.alerts.models import RawEvent, SearchParameters, SearchResult
from herald.clients.http_pool import SearchSession
from herald.config.splunk_config import SplunkConfig
from herald.config.timeout_config import SearchTimeoutConfig
from herald.exceptions import TransportError
from herald.utils.structured_logging import (
    log_search_complete,
    log_search_malformed,
    log_search_rejected,
)

logger = logging.getLogger(__name__)


def parse_search_rows(body: str) -> List[RawEvent]:
    """
    Parse a oneshot JSON response body into RawEvent rows.

    Accepts a bare JSON array of row objects or Splunk's
    ``{"results": [...]}`` envelope.

    Raises:
        ValueError: If the body is not JSON or not a list of row objects
    """
    payload: Any = json.loads(body)

    if isinstance(payload, dict):
        if 'results' not in payload:
            raise ValueError("JSON object has no 'results' member")
        payload = payload['results']

    if not isinstance(payload, list):
        raise ValueError(f"expected a list of rows, got {type(payload).__name__}")

    events = []
    for index, row in enumerate(payload):
        if not isinstance(row, dict):
            raise ValueError(f"row {index} is {type(row).__name__}, not an object")
        events.append(RawEvent.from_mapping(row))
    return events


class SplunkSearchClient:
    """
    Client for the Splunk search endpoint.

    Holds only read-only endpoint and timeout settings; every search opens
    and closes its own HTTP session, so one client can serve concurrent
    callers.
    """

    def __init__(
        self,
        config: SplunkConfig,
        timeouts: Optional[SearchTimeoutConfig] = None
    ):
        self.config = config
        self.timeouts = timeouts or SearchTimeoutConfig.from_env()

        for warning in self.timeouts.validate():
            logger.warning(f"Search timeout config: {warning}")

    @property
    def host(self) -> str:
        return self.config.host

    def search(self, params: SearchParameters) -> SearchResult:
        """
        Execute exactly one search request.

        Args:
            params: Oneshot search parameters

        Returns:
            SearchResult with events, or a soft failure

        Raises:
            TransportError: If the backend could not be reached in time
        """
        start = time.monotonic()
        logger.debug(f"Submitting search to {self.config.endpoint}: {params.search}")

        try:
            with SearchSession(
                self.config.username,
                self.config.password,
                verify_tls=self.config.verify_tls
            ) as session:
                response = session.post(
                    self.config.endpoint,
                    data=params.as_form_data(),
                    timeout=self.timeouts.as_requests_timeout(),
                )
        except requests.exceptions.Timeout as e:
            raise TransportError(self.host, f"timed out: {e}") from e
        except requests.exceptions.SSLError as e:
            raise TransportError(self.host, f"TLS failure: {e}") from e
        except (requests.exceptions.ConnectionError, requests.exceptions.ChunkedEncodingError) as e:
            raise TransportError(self.host, f"connection failed: {e}") from e
        except requests.exceptions.ContentDecodingError as e:
            log_search_malformed(self.host, f"undecodable body: {e}")
            return SearchResult.malformed(f"undecodable body: {e}")
        except requests.exceptions.RequestException as e:
            raise TransportError(self.host, f"request failed: {e}") from e

        if response.status_code != 200:
            log_search_rejected(self.host, response.status_code)
            return SearchResult.rejected(response.status_code, detail=response.reason or '')

        try:
            events = parse_search_rows(response.text)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            log_search_malformed(self.host, str(e))
            return SearchResult.malformed(str(e), status_code=response.status_code)

        log_search_complete(self.host, len(events), duration_seconds=round(time.monotonic() - start, 3))
        return SearchResult.success(events, status_code=response.status_code)
