"""
Splunk Search Endpoint Configuration

Endpoint and credentials for the alert history search backend.

Usage:
    from herald.config.splunk_config import SplunkConfig

    config = SplunkConfig.from_env()
    config.host, config.port, config.path

Environment variables:
    SPLUNK_URL         Search API URL (e.g. https://splunk.example.com:8089/services/search/jobs)
    SPLUNK_USERNAME    User allowed to run searches
    SPLUNK_PASSWORD    Password for SPLUNK_USERNAME
    SPLUNK_VERIFY_TLS  'true' to validate the server certificate (default: false)
    SPLUNK_INDEX       Index holding Nagios alert rows (default: nagios)

Certificate validation is off by default: internal search heads commonly run
with self-signed certificates. This leaves the connection open to
interception on an untrusted network; set SPLUNK_VERIFY_TLS=true wherever a
trusted certificate is available.
"""

import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from herald.alerts.models import DEFAULT_INDEX
from herald.exceptions import ConfigurationError

DEFAULT_PORTS = {'https': 443, 'http': 80}


@dataclass(frozen=True)
class SplunkConfig:
    """Read-only search endpoint settings; safe to share across threads."""
    url: str
    username: str
    password: str = field(repr=False)
    verify_tls: bool = False
    index: str = DEFAULT_INDEX

    def __post_init__(self):
        if not self.url:
            raise ConfigurationError("Splunk URL is not set", setting='SPLUNK_URL')

        parts = urlsplit(self.url)
        if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
            raise ConfigurationError(f"Malformed Splunk URL: {self.url!r}", setting='SPLUNK_URL')
        try:
            parts.port
        except ValueError as e:
            raise ConfigurationError(f"Malformed Splunk URL: {self.url!r} ({e})", setting='SPLUNK_URL') from e

        if not self.username:
            raise ConfigurationError("Splunk username is not set", setting='SPLUNK_USERNAME')
        if not self.password:
            raise ConfigurationError("Splunk password is not set", setting='SPLUNK_PASSWORD')

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname

    @property
    def port(self) -> int:
        parts = urlsplit(self.url)
        return parts.port or DEFAULT_PORTS[parts.scheme]

    @property
    def path(self) -> str:
        """Request URI: path plus query string, '/' when empty."""
        parts = urlsplit(self.url)
        path = parts.path or '/'
        if parts.query:
            path += f"?{parts.query}"
        return path

    @property
    def endpoint(self) -> str:
        host = self.host
        if ':' in host:
            # IPv6 literal; urlsplit drops the brackets
            host = f"[{host}]"
        return f"{self.scheme}://{host}:{self.port}{self.path}"

    @classmethod
    def from_env(cls, **overrides) -> 'SplunkConfig':
        """
        Build config from environment variables.

        Keyword overrides that are not None replace the environment value.

        Raises:
            ConfigurationError: If the URL or credentials are missing or malformed
        """
        values = {
            'url': os.getenv('SPLUNK_URL', ''),
            'username': os.getenv('SPLUNK_USERNAME', ''),
            'password': os.getenv('SPLUNK_PASSWORD', ''),
            'verify_tls': os.getenv('SPLUNK_VERIFY_TLS', 'false').lower() == 'true',
            'index': os.getenv('SPLUNK_INDEX', DEFAULT_INDEX),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
