"""
blog-archiver: Archived Blog Post Downloader

Reads an archived index page (usually a Wayback Machine capture of a blog's
front page), discovers the links to individual posts, then fetches, extracts
and saves every post as a Markdown file with bounded concurrency.
"""

__version__ = "1.0"
__author__ = "blog-archiver Project"
__description__ = "Archived Blog Post Downloader"
