"""
Structured Logging Utility

Adds queryable JSON fields to alert-frequency log lines so operators can tell
"backend rejected us" from "backend returned garbage" from "backend
unreachable" without parsing message text.

Usage:
    from herald.utils.structured_logging import log_search_rejected

    log_search_rejected(host='splunk.example.com', status_code=503)
    # Query: jsonPayload.event="search_rejected"

Fields are attached only when ENABLE_STRUCTURED_LOGGING=true; otherwise the
plain message is logged.
"""

import logging
import os
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import threading


# Thread-local storage for context
_context = threading.local()

SEARCH_LOGGER = 'herald.search'


class StructuredLogger:
    """
    Structured logging wrapper that adds JSON fields to log records.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Search complete", extra={
            'hostname': 'web0200.ny4',
            'event_count': 12,
        })
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.enabled = os.getenv('ENABLE_STRUCTURED_LOGGING', 'false').lower() == 'true'

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Add thread-local context to extra fields."""
        merged = {}

        if hasattr(_context, 'fields'):
            merged.update(_context.fields)

        if extra:
            merged.update(extra)

        return merged

    def info(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        if self.enabled and extra:
            self.logger.info(msg, extra=self._add_context(extra))
        else:
            self.logger.info(msg)

    def warning(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        if self.enabled and extra:
            self.logger.warning(msg, extra=self._add_context(extra))
        else:
            self.logger.warning(msg)

    def error(self, msg: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        if self.enabled and extra:
            self.logger.error(msg, extra=self._add_context(extra), exc_info=exc_info)
        else:
            self.logger.error(msg, exc_info=exc_info)

    def debug(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        if self.enabled and extra:
            self.logger.debug(msg, extra=self._add_context(extra))
        else:
            self.logger.debug(msg)


def set_logging_context(**fields):
    """
    Set thread-local logging context.

    These fields are added to every structured log statement in this thread.

    Usage:
        set_logging_context(hostname='web0200.ny4', service='Disk Space')
    """
    if not hasattr(_context, 'fields'):
        _context.fields = {}
    _context.fields.update(fields)


def clear_logging_context():
    """Clear thread-local logging context."""
    if hasattr(_context, 'fields'):
        _context.fields.clear()


def get_logging_context() -> Dict[str, Any]:
    """Get current thread-local logging context."""
    if hasattr(_context, 'fields'):
        return _context.fields.copy()
    return {}


# Convenience functions for search events

def log_search_complete(host: str, event_count: int, duration_seconds: float = None, **extra):
    """Log a successful search with structured fields."""
    logger = StructuredLogger(SEARCH_LOGGER)
    logger.debug(f"Search complete: {event_count} rows from {host}", extra={
        'event': 'search_complete',
        'search_host': host,
        'event_count': event_count,
        'duration_seconds': duration_seconds,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        **extra
    })


def log_search_rejected(host: str, status_code: int, **extra):
    """Log a non-success HTTP status from the search backend."""
    logger = StructuredLogger(SEARCH_LOGGER)
    logger.warning(f"Failed to submit search to Splunk: HTTP {status_code} from {host}", extra={
        'event': 'search_rejected',
        'failure': 'BACKEND_REJECTION',
        'search_host': host,
        'status_code': status_code,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        **extra
    })


def log_search_malformed(host: str, error_message: str, **extra):
    """Log a success status whose body could not be parsed."""
    logger = StructuredLogger(SEARCH_LOGGER)
    logger.warning(f"Failed to parse search response from {host}: {error_message}", extra={
        'event': 'search_malformed_response',
        'failure': 'MALFORMED_RESPONSE',
        'search_host': host,
        'error_message': error_message,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        **extra
    })


def log_search_transport_error(host: str, error_message: str, **extra):
    """Log a connection, TLS or timeout failure."""
    logger = StructuredLogger(SEARCH_LOGGER)
    logger.error(f"Search backend {host} unreachable: {error_message}", extra={
        'event': 'search_transport_error',
        'failure': 'TRANSPORT_ERROR',
        'search_host': host,
        'error_message': error_message,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        **extra
    })
