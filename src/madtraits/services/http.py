"""
Shared HTTP client for dataset downloads.

A pre-configured ``requests.Session`` that retries transient failures
(connection resets, 429, 502/503/504) with exponential backoff, identifies
itself to publisher archives, and applies a generous default timeout because
most sources are multi-megabyte flat files. Providers should download through
``madtraits.datasources.client`` (which uses this session) rather than calling
``requests.get`` directly.

Usage::

    from madtraits.services.http import session

    resp = session.get("http://esapubs.org/archive/ecol/E090/184/PanTHERIA_1-0_WR05_Aug2008.txt")
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from madtraits import __version__

#: Retries are few and slow: archives are shared academic servers.
DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=5,  # 0s, 10s, 20s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    respect_retry_after_header=True,
    raise_on_status=False,  # providers call resp.raise_for_status()
)

DEFAULT_TIMEOUT = 120  # seconds; whole-dataset downloads

USER_AGENT = f"madtraits/{__version__} (species trait database builder)"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a ``requests.Session`` for dataset downloads.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout applied to every request that doesn't pass one.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Wrap send so every request gets a timeout; a hung archive would
    # otherwise stall the whole collection run.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session shared by all providers.
session: requests.Session = create_session()
