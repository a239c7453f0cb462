"""Data models for blog-archiver."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class RunPhase(Enum):
    """Stages of a single archiver run."""

    FETCHING_INDEX = "fetching_index"
    EXTRACTING_LINKS = "extracting_links"
    PROCESSING = "processing"
    DONE = "done"


@dataclass
class ExtractedDocument:
    """Title and Markdown body of one archived post."""

    title: str
    body: str
    url: str = ""


@dataclass
class LinkOutcome:
    """Result of processing one post link."""

    url: str
    success: bool
    output_path: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def ok(cls, url: str, output_path: str) -> "LinkOutcome":
        return cls(url=url, success=True, output_path=output_path)

    @classmethod
    def failed(cls, url: str, error: Exception) -> "LinkOutcome":
        return cls(url=url, success=False, error=str(error), error_type=type(error).__name__)


@dataclass
class RunReport:
    """Aggregate result of a run."""

    base_url: str
    links_found: int = 0
    outcomes: List[LinkOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> List[LinkOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[LinkOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)
