# herald/clients/__init__.py

"""
Search backend clients.

Usage:
    from herald.clients import SplunkSearchClient

    client = SplunkSearchClient(SplunkConfig.from_env())
    result = client.search(params)
"""

from herald.clients.http_pool import SearchSession, create_search_session
from herald.clients.splunk_client import SplunkSearchClient, parse_search_rows


__all__ = [
    'SearchSession',
    'create_search_session',
    'SplunkSearchClient',
    'parse_search_rows',
]
