#!/usr/bin/env python3
"""
Document extraction tests: title lookup, body conversion and degraded pages.
"""

import sys
from pathlib import Path

import pytest

# Add the src directory to the path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from blog_archiver.core.document_extractor import DocumentExtractor
from blog_archiver.exceptions import ExtractionError, MissingTitleError


WAYBACK_POST = """
<!DOCTYPE html>
<html>
<head>
    <title>Angaat op zoek | My Title</title>
    <script src="https://web.archive.org/_static/js/wombat.js"></script>
    <style>body { color: red }</style>
</head>
<body>
    <!-- BEGIN WAYBACK TOOLBAR INSERT -->
    <div id="wm-ipp-base"><div id="wm-ipp">Wayback Machine toolbar</div></div>
    <!-- END WAYBACK TOOLBAR INSERT -->
    <nav><a href="/">Home</a> <a href="/about/">About</a></nav>
    <article>
        <h4>My Title</h4>
        <p>P1</p>
        <h2>Section</h2>
        <p>P2 with <a href="https://web.archive.org/web/20140101000000/http://example.com/x">a link</a></p>
        <cite>Someone famous</cite>
    </article>
    <script>var _wb_wombat = true;</script>
</body>
</html>
"""


def test_title_and_body_in_order():
    doc = DocumentExtractor().extract(WAYBACK_POST, "http://example.com/post/")
    assert doc.title == "My Title"
    assert doc.url == "http://example.com/post/"
    assert "P1" in doc.body and "P2" in doc.body
    assert doc.body.index("P1") < doc.body.index("P2")


def test_body_keeps_heading_structure_and_drops_chrome():
    doc = DocumentExtractor().extract(WAYBACK_POST)
    assert "## Section" in doc.body
    assert "Someone famous" in doc.body
    assert "Wayback Machine toolbar" not in doc.body
    assert "Home" not in doc.body
    assert "color: red" not in doc.body
    assert "_wb_wombat" not in doc.body


def test_title_heading_not_repeated_in_body():
    doc = DocumentExtractor().extract(WAYBACK_POST)
    assert not doc.body.startswith("#### My Title")
    assert "My Title" not in doc.body


def test_archived_links_point_to_original():
    doc = DocumentExtractor().extract(WAYBACK_POST)
    assert "(http://example.com/x)" in doc.body
    assert "web.archive.org" not in doc.body


def test_archive_relative_links_point_to_original():
    html = """<html><body><article><h1>Relative</h1>
    <p>See <a href="/web/20140101000000/http://example.com/other/">the other post</a>
    and <a href="/about/">about</a>.</p>
    </article></body></html>"""
    page_url = "https://web.archive.org/web/20140101000000/http://example.com/2014/01/01/relative/"
    doc = DocumentExtractor().extract(html, page_url)
    assert "(http://example.com/other/)" in doc.body
    assert "/web/20140101000000/" not in doc.body
    # links outside the archive namespace are left as written
    assert "(/about/)" in doc.body


def test_missing_container_degrades_to_page_body():
    html = """<html><body>
    <header>Blog header</header>
    <h1>Heading Only</h1>
    <div><p>First paragraph</p><p>Second paragraph</p></div>
    <script>alert('x')</script>
    <footer>Copyright</footer>
    </body></html>"""
    doc = DocumentExtractor().extract(html)
    assert doc.title == "Heading Only"
    assert doc.body.index("First paragraph") < doc.body.index("Second paragraph")
    assert "alert" not in doc.body
    assert "Copyright" not in doc.body
    assert "Blog header" not in doc.body


def test_falls_back_to_title_element():
    html = "<html><head><title>  Page   Title </title></head><body><p>Text</p></body></html>"
    doc = DocumentExtractor().extract(html)
    assert doc.title == "Page Title"
    assert "Text" in doc.body


def test_container_heading_preferred_over_site_heading():
    html = """<html><body>
    <h1>Blog Name</h1>
    <div class="post"><h2>Actual Post</h2><p>Body</p></div>
    </body></html>"""
    doc = DocumentExtractor().extract(html)
    assert doc.title == "Actual Post"
    assert doc.body == "Body"


def test_custom_selectors():
    html = """<html><body>
    <h1>Blog Name</h1><h4>Post Title</h4>
    <div id="story"><p>Story text</p></div><div id="sidebar"><p>Sidebar</p></div>
    </body></html>"""
    doc = DocumentExtractor(title_selector="h4", content_selector="#story").extract(html)
    assert doc.title == "Post Title"
    assert doc.body == "Story text"


def test_missing_title_raises():
    with pytest.raises(MissingTitleError) as excinfo:
        DocumentExtractor().extract("<html><body><p>No heading here</p></body></html>", "http://x/p/")
    assert isinstance(excinfo.value, ExtractionError)
    assert excinfo.value.url == "http://x/p/"


def test_blank_headings_do_not_count_as_title():
    with pytest.raises(MissingTitleError):
        DocumentExtractor().extract("<html><head><title> </title></head><body><h2>  </h2></body></html>")


def test_empty_and_garbage_markup():
    with pytest.raises(MissingTitleError):
        DocumentExtractor().extract("")
    doc = DocumentExtractor().extract("<h3>Only a heading")
    assert doc.title == "Only a heading"
    assert doc.body == ""
