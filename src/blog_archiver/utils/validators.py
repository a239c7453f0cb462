"""
URL Validation Utilities

This module provides URL validation, normalization and Wayback Machine URL
unwrapping for blog-archiver.
"""

import re
from urllib.parse import urlparse, urlunparse
from typing import Tuple, Optional
import logging


# web.archive.org/web/<14-digit timestamp><optional flags like id_ or im_>/<original url>
WAYBACK_URL_PATTERN = re.compile(
    r'^https?://(?:www\.)?web\.archive\.org/web/(?P<timestamp>\d{1,14})(?P<flags>[a-z]{2}_)?/(?P<original>.+)$',
    re.IGNORECASE
)


class URLValidator:
    """
    Validates and normalizes base URLs handed to the archiver.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        self.domain_pattern = re.compile(
            r'^[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*$'
        )

    def validate_and_normalize(self, url: str) -> Tuple[bool, str, str]:
        """
        Validate and normalize a URL.

        A missing scheme is filled in with https. Only http and https are
        accepted and the host must look like a domain name.

        Args:
            url: The URL to validate and normalize

        Returns:
            Tuple of (is_valid, normalized_url, error_message)
        """
        if not url or not isinstance(url, str):
            return False, "", "URL cannot be empty"

        url = url.strip()
        if not url:
            return False, "", "URL cannot be empty"

        try:
            parsed = urlparse(url)
            if not parsed.scheme:
                parsed = urlparse('https://' + url)
            elif parsed.scheme not in ('http', 'https'):
                return False, "", "URL must use HTTP or HTTPS protocol"
            domain = parsed.hostname or ""
        except ValueError as e:
            return False, "", f"URL validation error: {e}"

        if not parsed.netloc:
            return False, "", "URL must have a valid domain"

        if not self.domain_pattern.match(domain):
            return False, "", "Invalid domain format"

        normalized = urlunparse((
            parsed.scheme.lower(),
            parsed.netloc.lower(),
            parsed.path or '/',
            parsed.params,
            parsed.query,
            ''
        ))
        return True, normalized, ""


_validator_instance: Optional[URLValidator] = None


def get_validator() -> URLValidator:
    """Return the shared URLValidator instance."""
    global _validator_instance
    if _validator_instance is None:
        _validator_instance = URLValidator()
    return _validator_instance


def validate_url(url: str) -> Tuple[bool, str, str]:
    """
    Validate and normalize a URL.

    Returns:
        Tuple of (is_valid, normalized_url, error_message)
    """
    return get_validator().validate_and_normalize(url)


def split_wayback_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Split a Wayback Machine URL into its capture timestamp and original URL.

    Returns:
        (timestamp, original_url), or None if url is not a Wayback URL
    """
    match = WAYBACK_URL_PATTERN.match(url or '')
    if not match:
        return None
    original = match.group('original')
    # The archive sometimes collapses "http://" to "http:/"
    original = re.sub(r'^(https?):/+', r'\1://', original, flags=re.IGNORECASE)
    if not re.match(r'^https?://', original, re.IGNORECASE):
        original = 'http://' + original
    return match.group('timestamp'), original


def unwrap_wayback_url(url: str) -> str:
    """Return the original URL behind a Wayback URL, or url unchanged."""
    parts = split_wayback_url(url)
    return parts[1] if parts else url


def normalize_host(netloc: str) -> str:
    """
    Normalize a network location for comparison:
    - Lowercase, strip credentials and leading 'www.'
    - Remove default ports 80/443
    """
    host = netloc.lower().rsplit('@', 1)[-1]
    if host.endswith(":80"):
        host = host[:-3]
    elif host.endswith(":443"):
        host = host[:-4]
    if host.startswith("www."):
        host = host[4:]
    return host
