"""
Link Filtering Module

Decides which candidate links on an index page point at individual posts.
Filtering is pure string work: no network or filesystem access.
"""

import re
from typing import Iterable, List, Optional, Pattern, Union
from urllib.parse import urljoin, urldefrag, urlparse, urlunparse

from ..utils.validators import normalize_host, unwrap_wayback_url


# Dated permalinks such as 2014/05/12/some-post/ relative to the blog root
DEFAULT_DOCUMENT_PATTERN = r'\d{4}/\d{2}/\d{2}/[^/]+/?'


class LinkFilter:
    """
    Classifies candidate URLs against the archived site's post URL shape.

    A candidate is accepted when, after resolving it against the base URL,
    dropping its fragment and unwrapping any Wayback Machine prefix:

    1. it lives on the base site's host, under the base path;
    2. its path relative to the base path fully matches document_pattern;
    3. its last path segment is a non-empty, non-numeric slug.

    Accepted links are deduplicated on their normalized original URL, so
    fragment variants and repeated captures of the same post collapse to the
    first one seen.
    """

    def __init__(self, base_url: str, document_pattern: Union[str, Pattern] = DEFAULT_DOCUMENT_PATTERN):
        self.base_url = base_url
        self.pattern = re.compile(document_pattern) if isinstance(document_pattern, str) else document_pattern

        base = urlparse(unwrap_wayback_url(urldefrag(base_url)[0]))
        self.base_host = normalize_host(base.netloc)
        self.base_path = base.path if base.path.endswith('/') else base.path + '/'

    def resolve(self, candidate: str) -> str:
        """Absolute, fragment-less form of a candidate link."""
        return urldefrag(urljoin(self.base_url, candidate.strip()))[0]

    def normalize(self, candidate: str) -> Optional[str]:
        """
        Identity used for deduplication, or None if the link is not a post.

        Scheme, www prefix, default ports, capture timestamp and a trailing
        slash do not distinguish posts.
        """
        try:
            original = urlparse(unwrap_wayback_url(self.resolve(candidate)))
            netloc = original.netloc
        except ValueError:
            # e.g. a malformed IPv6 host
            return None
        if original.scheme not in ('http', 'https'):
            return None
        if normalize_host(netloc) != self.base_host:
            return None

        path = original.path
        if not path.startswith(self.base_path):
            return None
        relative = path[len(self.base_path):]
        if not self.pattern.fullmatch(relative):
            return None

        trimmed = relative[:-1] if relative.endswith('/') else relative
        slug = trimmed.rsplit('/', 1)[-1]
        if not slug or slug.isdigit():
            return None

        return urlunparse(('', self.base_host, path.rstrip('/') + '/', '', original.query, ''))

    def accepts(self, candidate: str) -> bool:
        return self.normalize(candidate) is not None

    def filter(self, candidates: Iterable[str]) -> List[str]:
        """
        Return the post links among candidates, first occurrence wins.

        The returned URLs are absolute and fragment-less.
        """
        seen = set()
        links = []
        for candidate in candidates:
            key = self.normalize(candidate)
            if key is None or key in seen:
                continue
            seen.add(key)
            links.append(self.resolve(candidate))
        return links
