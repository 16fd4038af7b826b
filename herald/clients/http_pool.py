"""
HTTP Session Factory for the Search Backend

Builds requests sessions configured for the alert history search:
- HTTP Basic credentials
- No automatic retries (one request per search)
- Optional certificate validation
- JSON Accept header

Usage:
    from herald.clients.http_pool import SearchSession

    with SearchSession(username, password, verify_tls=False) as session:
        response = session.post(url, data=form, timeout=(1, 2))

A fresh session is opened per search and closed afterwards, so nothing is
shared between concurrent invocations.

With verify_tls=False (the default) urllib3 emits an InsecureRequestWarning
for every search. That is expected in this mode and is left unfiltered;
set SPLUNK_VERIFY_TLS=true to validate certificates, or filter the warning in
the calling process if the noise is unwanted.
"""

import logging
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

USER_AGENT = 'alert-frequency/1.0'


def create_search_session(
    username: str,
    password: str,
    verify_tls: bool = False,
    pool_maxsize: int = 1
) -> Session:
    """
    Create an authenticated session for search requests.

    Args:
        username: Basic auth user
        password: Basic auth password
        verify_tls: Validate the server certificate
        pool_maxsize: Connections kept in the pool (default: 1)

    Returns:
        requests.Session: Configured session
    """
    session = Session()

    # Retries are the caller's business; never resend a search here
    retry_strategy = Retry(total=0, connect=0, read=0, redirect=0, raise_on_status=False)

    adapter = HTTPAdapter(
        pool_connections=1,
        pool_maxsize=pool_maxsize,
        max_retries=retry_strategy
    )

    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.auth = (username, password)
    session.verify = verify_tls

    session.headers.update({
        'User-Agent': USER_AGENT,
        'Accept': 'application/json',
    })

    if not verify_tls:
        logger.debug("TLS certificate validation disabled for search session")

    return session


class SearchSession:
    """
    Context manager for a single-use search session.

    Example:
        with SearchSession('svc', 'secret') as session:
            response = session.post(url, data=form)

        # Session closed after 'with' block
    """

    def __init__(self, username: str, password: str, **kwargs):
        """
        Args:
            username: Basic auth user
            password: Basic auth password
            **kwargs: Arguments passed to create_search_session()
        """
        self.username = username
        self.password = password
        self.kwargs = kwargs
        self.session = None

    def __enter__(self) -> Session:
        self.session = create_search_session(self.username, self.password, **self.kwargs)
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            self.session.close()
            self.session = None
        return False  # Don't suppress exceptions
