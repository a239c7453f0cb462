#!/usr/bin/env python3
"""
Command-line tests: exit codes and the final summary.
"""

import logging
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

# Add the src directory to the path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from blog_archiver.cli import main
from blog_archiver.core.html_retriever import HTMLRetriever
from blog_archiver.exceptions import FetchError


BASE = "https://web.archive.org/web/20150101000000/http://blog.example.com/"
POST_A = "https://web.archive.org/web/20141231000000/http://blog.example.com/2014/05/01/first/"
POST_B = "https://web.archive.org/web/20141231000000/http://blog.example.com/2014/05/02/second/"

PAGES = {
    BASE: f'<html><body><a href="{POST_A}">A</a><a href="{POST_B}">B</a></body></html>',
    POST_A: "<html><body><article><h1>First</h1><p>Hello</p></article></body></html>",
    POST_B: "<html><body><article><h1>Second</h1><p>World</p></article></body></html>",
}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("blog_archiver")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


def serve(pages):
    def fake_fetch(self, url):
        if url not in pages:
            raise FetchError("HTTP 404", url=url, status_code=404)
        return pages[url]
    return fake_fetch


def test_successful_run_exits_zero(tmp_path, monkeypatch):
    monkeypatch.setattr(HTMLRetriever, "fetch", serve(PAGES))
    result = CliRunner().invoke(main, [BASE, str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert "Found 2 post links" in result.output
    assert "Saved: 2" in result.output
    assert (tmp_path / "out" / "First.md").exists()
    assert (tmp_path / "out" / "Second.md").exists()


def test_partial_failure_is_reported_and_exits_zero(tmp_path, monkeypatch):
    pages = dict(PAGES)
    del pages[POST_B]
    monkeypatch.setattr(HTMLRetriever, "fetch", serve(pages))
    result = CliRunner().invoke(main, [BASE, str(tmp_path), "--concurrency", "1", "--manifest"])

    assert result.exit_code == 0, result.output
    assert "Saved: 1" in result.output
    assert "Failed: 1" in result.output
    assert POST_B in result.output
    assert (tmp_path / "manifest.jsonl").exists()


def test_index_failure_exits_two(tmp_path, monkeypatch):
    monkeypatch.setattr(HTMLRetriever, "fetch", serve({}))
    result = CliRunner().invoke(main, [BASE, str(tmp_path)])
    assert result.exit_code == 2
    assert "Could not fetch index page" in result.output


def test_bad_configuration_exits_two(tmp_path):
    result = CliRunner().invoke(main, [BASE, str(tmp_path), "--concurrency", "0"])
    assert result.exit_code == 2
    assert "Configuration error" in result.output
