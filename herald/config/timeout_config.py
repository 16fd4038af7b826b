"""
Search Timeout Configuration

Latency budget for the alert history search. The enrichment must never hold
up delivery of the alert it decorates, so every network phase is bounded.

Usage:
    from herald.config.timeout_config import SearchTimeoutConfig

    timeouts = SearchTimeoutConfig.from_env()
    session.post(url, data=form, timeout=timeouts.as_requests_timeout())
"""

from dataclasses import dataclass
import os
from typing import Tuple


@dataclass
class SearchTimeoutConfig:
    """
    Timeouts for one search request, in seconds.

    Can be overridden via environment variables.
    """

    # TCP connection establishment (1 second)
    CONNECT_TIMEOUT: float = 1

    # TLS handshake (1 second)
    TLS_HANDSHAKE_TIMEOUT: float = 1

    # Waiting for the response body (2 seconds)
    READ_TIMEOUT: float = 2

    @classmethod
    def from_env(cls):
        """
        Create SearchTimeoutConfig with values from environment variables.

        Variable names: TIMEOUT_<CONSTANT_NAME>

        Example:
            TIMEOUT_READ_TIMEOUT=5
        """
        config = cls()

        for attr_name in dir(config):
            if attr_name.isupper():
                env_value = os.getenv(f"TIMEOUT_{attr_name}")

                if env_value:
                    try:
                        setattr(config, attr_name, float(env_value))
                    except ValueError:
                        # Keep default
                        pass

        return config

    def as_requests_timeout(self) -> Tuple[float, float]:
        """
        (connect, read) tuple for requests.

        urllib3 performs the TLS handshake under the connect timeout, so the
        connect slot carries the larger of the two bounds.
        """
        return (max(self.CONNECT_TIMEOUT, self.TLS_HANDSHAKE_TIMEOUT), self.READ_TIMEOUT)

    def worst_case_seconds(self) -> float:
        """Upper bound on wall-clock time for one search."""
        return self.CONNECT_TIMEOUT + self.TLS_HANDSHAKE_TIMEOUT + self.READ_TIMEOUT

    def validate(self) -> list:
        """
        Validate timeout configuration.

        Returns:
            list: List of validation warnings
        """
        warnings = []

        for attr_name in ('CONNECT_TIMEOUT', 'TLS_HANDSHAKE_TIMEOUT', 'READ_TIMEOUT'):
            value = getattr(self, attr_name)
            if value <= 0:
                warnings.append(f"{attr_name} ({value}s) must be positive")

        if self.worst_case_seconds() > 10:
            warnings.append(
                f"Worst-case search time ({self.worst_case_seconds()}s) may delay alert delivery"
            )

        return warnings
