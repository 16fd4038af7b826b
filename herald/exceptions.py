"""
Alert frequency error taxonomy.

Only ConfigurationError is meant to abort a caller's notification flow.
Backend rejections and malformed responses are not exceptions at all; they
come back as SearchFailure values on a SearchResult.
"""

from typing import Optional


class AlertFrequencyError(Exception):
    """Base class for alert-frequency errors."""


class ConfigurationError(AlertFrequencyError):
    """Raised when the search endpoint or credentials are unusable."""

    def __init__(self, message: str, setting: Optional[str] = None):
        self.setting = setting
        super().__init__(message)


class SearchError(AlertFrequencyError):
    """Base class for failures while running a search."""


class TransportError(SearchError):
    """Raised when the search backend cannot be reached in time (DNS, connect, TLS, read timeout)."""

    def __init__(self, host: str, reason: str):
        self.host = host
        self.reason = reason
        super().__init__(f"Search transport failure for '{host}': {reason}")
