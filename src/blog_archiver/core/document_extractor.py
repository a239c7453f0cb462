"""
Document Extraction Module

Turns the markup of one archived post into a title and a Markdown body.
Only the missing-title case is an error; every other surprise in the page
structure degrades to a best-effort body.
"""

import logging
import re
from typing import Optional

import html2text
from bs4 import BeautifulSoup, Tag

from ..exceptions import MissingTitleError
from ..models import ExtractedDocument
from .html_cleaner import HTMLCleaner, PAGE_CHROME_TAGS


DEFAULT_TITLE_SELECTOR = 'h1, h2, h3, h4, h5, h6'
DEFAULT_CONTENT_SELECTOR = 'article, main, .post, .entry, .entry-content, #content'


class DocumentExtractor:
    """
    Extracts {title, body} from a post page.

    Title: first element matching title_selector inside the content
    container, then anywhere in the page, then the <title> element.

    Body: the first element matching content_selector, converted to
    Markdown. Without a container the whole <body> is used, minus the
    header, footer and aside chrome.
    """

    def __init__(self,
                 title_selector: str = DEFAULT_TITLE_SELECTOR,
                 content_selector: str = DEFAULT_CONTENT_SELECTOR):
        self.title_selector = title_selector
        self.content_selector = content_selector
        self.cleaner = HTMLCleaner()
        self.logger = logging.getLogger(__name__)

    def extract(self, html_content: str, url: str = "") -> ExtractedDocument:
        """
        Extract a post from its page markup.

        Raises:
            MissingTitleError: if the page has no usable heading or <title>
        """
        soup = BeautifulSoup(html_content or "", 'lxml')
        self.cleaner.clean(soup, url)

        container = soup.select_one(self.content_selector)
        title = self._extract_title(soup, container)
        if not title:
            raise MissingTitleError("No heading or <title> found", url=url)

        if container is None:
            self.logger.debug(f"No content container in {url or 'page'}, using page body")
            self.cleaner.remove_tags(soup, PAGE_CHROME_TAGS)
            container = soup.body or soup

        body = self._drop_leading_title(self._to_markdown(container), title)
        return ExtractedDocument(title=title, body=body, url=url)

    def _extract_title(self, soup: BeautifulSoup, container: Optional[Tag]) -> str:
        for scope in (container, soup):
            if scope is None:
                continue
            for heading in scope.select(self.title_selector):
                text = _collapse(heading.get_text(' '))
                if text:
                    return text

        if soup.title is not None:
            return _collapse(soup.title.get_text(' '))
        return ""

    def _to_markdown(self, element: Tag) -> str:
        converter = html2text.HTML2Text()
        converter.body_width = 0
        converter.ignore_images = True
        converter.ignore_emphasis = False
        converter.ignore_links = False
        markdown = converter.handle(str(element))
        markdown = re.sub(r'\n{3,}', '\n\n', markdown)
        return "\n".join(line.rstrip() for line in markdown.split("\n")).strip()

    def _drop_leading_title(self, body: str, title: str) -> str:
        """The saved file repeats the title as a heading, so drop it here."""
        first, _, rest = body.partition("\n")
        if _collapse(first.lstrip('#')) == title:
            return rest.strip()
        return body


def _collapse(text: str) -> str:
    return re.sub(r'\s+', ' ', text or '').strip()
