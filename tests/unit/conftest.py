# tests/unit/conftest.py
"""
Shared pytest configuration for unit tests.

Puts the project root at the front of sys.path and provides fixtures for the
search client tests.
"""
import sys
import os

import pytest

# Add project root to path FIRST to ensure proper import resolution
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root in sys.path:
    sys.path.remove(project_root)
sys.path.insert(0, project_root)

from herald.config.splunk_config import SplunkConfig  # noqa: E402
from herald.config.timeout_config import SearchTimeoutConfig  # noqa: E402


SPLUNK_URL = "https://splunk.example.com:8089/services/search/jobs/export"


@pytest.fixture
def splunk_config():
    return SplunkConfig(url=SPLUNK_URL, username="nagios", password="s3cret")


@pytest.fixture
def timeouts():
    return SearchTimeoutConfig()


@pytest.fixture(autouse=True)
def _clean_search_env(monkeypatch):
    """Keep developer shell settings out of config tests."""
    for name in (
        'SPLUNK_URL', 'SPLUNK_USERNAME', 'SPLUNK_PASSWORD', 'SPLUNK_VERIFY_TLS', 'SPLUNK_INDEX',
        'TIMEOUT_CONNECT_TIMEOUT', 'TIMEOUT_TLS_HANDSHAKE_TIMEOUT', 'TIMEOUT_READ_TIMEOUT',
        'ENABLE_STRUCTURED_LOGGING',
    ):
        monkeypatch.delenv(name, raising=False)
