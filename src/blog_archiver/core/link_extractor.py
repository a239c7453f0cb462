"""
Link Extraction Module

Pulls candidate post links out of an index page's markup.
"""

from typing import Iterator

from bs4 import BeautifulSoup


def extract_links(html_content: str) -> Iterator[str]:
    """
    Yield the href of every anchor in the page, in document order.

    Hrefs are returned as found (possibly relative); resolving and filtering
    them is the job of LinkFilter. Broken markup yields whatever anchors
    lxml manages to recover.
    """
    if not html_content:
        return
    soup = BeautifulSoup(html_content, 'lxml')
    for anchor in soup.find_all('a', href=True):
        href = anchor['href'].strip()
        if href:
            yield href
