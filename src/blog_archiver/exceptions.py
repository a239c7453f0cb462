"""Exceptions raised by blog-archiver."""

from typing import Optional


class ArchiverError(Exception):
    """Base exception for blog-archiver."""


class ConfigError(ArchiverError):
    """Raised when the run configuration is invalid."""


class FetchError(ArchiverError):
    """Raised when a page cannot be downloaded (network, timeout, HTTP status)."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(ArchiverError):
    """Raised when a document page cannot be turned into a post."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class MissingTitleError(ExtractionError):
    """Raised when a page has neither a heading nor a <title> element."""


class PersistError(ArchiverError):
    """Raised when an extracted post cannot be written to disk."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class FatalPipelineError(ArchiverError):
    """Raised when the index phase fails and there is nothing to process."""
