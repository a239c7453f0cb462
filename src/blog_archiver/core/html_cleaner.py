"""
HTML Content Cleaning Module

Strips what the Wayback Machine injects into archived pages (toolbar,
scripts, stylesheets, comments, rewritten URLs) and the page boilerplate
that never belongs in a post body.
"""

from bs4 import BeautifulSoup, Comment
import re
import logging
from typing import Iterable
from urllib.parse import urljoin

from ..utils.validators import unwrap_wayback_url


# Removed before looking for a title or a content container
BOILERPLATE_TAGS = ('script', 'style', 'noscript', 'nav', 'iframe', 'form', 'template')

# Additionally removed when the whole page body is used as the post body
PAGE_CHROME_TAGS = ('header', 'footer', 'aside')


class HTMLCleaner:
    """
    Cleans a parsed page in place.

    The Wayback Machine serves archived pages with extra markup:
    - the archive toolbar (#wm-ipp and friends)
    - JavaScript and CSS for the archive interface
    - links rewritten to point back into web.archive.org
    - BEGIN/END WAYBACK TOOLBAR INSERT comments
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        self.wayback_selectors = [
            '#wm-ipp-base',
            '#wm-ipp',
            '#wm-capresources',
            '#wm-expand',
            '#donato',
            '.wb-overlay',
            '.wb-autocomplete-suggestions',
            '[id^="wm-"]',
            '[class^="wb-"]',
        ]

        self.wayback_script_patterns = [
            r'web\.archive\.org',
            r'wayback',
            r'wbhack',
            r'_wb_wombat',
            r'archive_analytics',
            r'__wb_'
        ]

    def clean(self, soup: BeautifulSoup, page_url: str = "") -> BeautifulSoup:
        """
        Remove archive artifacts and boilerplate from soup.

        page_url is the address the page was fetched from; archive-relative
        links such as /web/<timestamp>/http://... are resolved against it.

        Returns the same soup for chaining.
        """
        self._remove_wayback_elements(soup)
        self._remove_wayback_comments(soup)
        self.remove_tags(soup, BOILERPLATE_TAGS)
        self._restore_urls(soup, page_url)
        return soup

    def remove_tags(self, soup: BeautifulSoup, tag_names: Iterable[str]) -> int:
        """Decompose every element with one of tag_names; returns the count."""
        removed = 0
        for element in soup.find_all(list(tag_names)):
            if not element.decomposed:
                element.decompose()
                removed += 1
        return removed

    def _remove_wayback_elements(self, soup: BeautifulSoup) -> None:
        """Remove Wayback Machine UI elements and injected scripts/styles."""
        removed_count = 0

        for selector in self.wayback_selectors:
            for element in soup.select(selector):
                if not element.decomposed:
                    element.decompose()
                    removed_count += 1

        for tag in soup.find_all(['script', 'link', 'style']):
            if tag.decomposed:
                continue
            source = ' '.join([tag.get('src', ''), tag.get('href', ''), tag.get_text()])
            if any(re.search(pattern, source, re.I) for pattern in self.wayback_script_patterns):
                tag.decompose()
                removed_count += 1

        if removed_count > 0:
            self.logger.debug(f"Removed {removed_count} Wayback UI elements")

    def _remove_wayback_comments(self, soup: BeautifulSoup) -> None:
        """Remove HTML comments injected by the Wayback Machine."""
        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment_text = str(comment).lower()
            if any(keyword in comment_text for keyword in ['wayback', 'archive.org', 'web.archive']):
                comment.extract()

    def _restore_urls(self, soup: BeautifulSoup, page_url: str = "") -> None:
        """Point links and images back at their original, unarchived URLs."""
        restored_count = 0
        for attr in ('href', 'src'):
            for element in soup.find_all(attrs={attr: True}):
                value = element[attr]
                if not isinstance(value, str):
                    continue
                try:
                    absolute = urljoin(page_url, value.strip()) if page_url else value
                except ValueError:
                    continue
                original = unwrap_wayback_url(absolute)
                if original != absolute:
                    element[attr] = original
                    restored_count += 1

        if restored_count > 0:
            self.logger.debug(f"Restored {restored_count} URLs")
