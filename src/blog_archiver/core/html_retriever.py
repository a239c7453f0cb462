"""
HTML Content Retrieval Module

This module downloads the raw markup of archived pages. Each call makes a
single HTTP GET; failures are raised as FetchError and the caller decides
whether they are fatal (index page) or only fail one post.
"""

import logging
from typing import Optional

import requests

from .. import __version__
from ..exceptions import FetchError
from ..utils.rate_limiter import TokenBucket


DEFAULT_USER_AGENT = f"blog_archiver/{__version__}"


class HTMLRetriever:
    """
    Downloads HTML over HTTP(S) through one shared requests session.

    requests.Session is safe to share between the pipeline's worker threads
    for plain GET requests.
    """

    def __init__(self,
                 timeout: float = 30.0,
                 user_agent: str = DEFAULT_USER_AGENT,
                 rate_limiter: Optional[TokenBucket] = None):
        """
        Initialize the HTML retriever.

        Args:
            timeout: Seconds to wait for connect and for each read
            user_agent: User-Agent header sent with every request
            rate_limiter: Optional shared limiter acquired before each request
        """
        self.timeout = timeout
        self.rate_limiter = rate_limiter
        self.logger = logging.getLogger(__name__)

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        })

    def fetch(self, url: str) -> str:
        """
        Retrieve the markup of a page.

        Args:
            url: Absolute URL to download

        Returns:
            The decoded response body

        Raises:
            FetchError: on timeouts, connection errors and non-2xx responses
        """
        self.logger.info(f"Retrieving: {url}")

        if self.rate_limiter:
            self.rate_limiter.acquire()

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"Timeout retrieving {url}")
            raise FetchError(f"Timed out after {self.timeout}s", url=url) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            self.logger.warning(f"HTTP error {status_code} for {url}")
            raise FetchError(f"HTTP {status_code}", url=url, status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"Request error for {url}: {e}")
            raise FetchError(f"Request failed: {e}", url=url) from e

        content_type = response.headers.get('content-type', '').lower()
        if content_type and 'html' not in content_type:
            # Archives sometimes serve pages with the wrong header
            self.logger.debug(f"Non-HTML content type for {url}: {content_type}")

        html_content = response.text
        self.logger.debug(f"Retrieved {len(html_content)} chars for {url}")
        return html_content

    def close(self):
        """Close the HTTP session."""
        self.session.close()
        self.logger.debug("HTML retriever session closed")

    def __enter__(self) -> "HTMLRetriever":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
