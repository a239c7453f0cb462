"""
blog-archiver Orchestrator: runs the end-to-end pipeline.

FETCHING_INDEX -> EXTRACTING_LINKS -> PROCESSING -> DONE

The index phase must succeed (FatalPipelineError otherwise). Posts are then
processed on a bounded thread pool; each post's failure is recorded in the
report and never stops the other posts.
"""

from __future__ import annotations

import re
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, List, Dict, Any
from concurrent.futures import ThreadPoolExecutor, as_completed

import soupsieve

from ..exceptions import ArchiverError, ConfigError, FetchError, FatalPipelineError
from ..models import LinkOutcome, RunPhase, RunReport
from ..utils.file_manager import FileManager
from ..utils.manifest import Manifest
from ..utils.rate_limiter import TokenBucket
from ..utils.validators import validate_url
from .document_extractor import DocumentExtractor, DEFAULT_CONTENT_SELECTOR, DEFAULT_TITLE_SELECTOR
from .html_retriever import HTMLRetriever, DEFAULT_USER_AGENT
from .link_extractor import extract_links
from .link_filter import LinkFilter, DEFAULT_DOCUMENT_PATTERN


ProgressCallback = Callable[[Dict[str, Any]], None]


@dataclass
class RunConfig:
    base_url: str
    output_dir: str = "output"
    concurrency: int = 4
    timeout: float = 30.0
    delay_secs: float = 0.0  # 0 = no rate limiting
    document_pattern: str = DEFAULT_DOCUMENT_PATTERN
    title_selector: str = DEFAULT_TITLE_SELECTOR
    content_selector: str = DEFAULT_CONTENT_SELECTOR
    user_agent: str = DEFAULT_USER_AGENT
    max_links: int = 0  # 0 = no cap
    write_manifest: bool = False

    def validate(self) -> None:
        """Raise ConfigError if the configuration cannot be run."""
        ok, _, err = validate_url(self.base_url)
        if not ok:
            raise ConfigError(f"Invalid base URL {self.base_url!r}: {err}")
        if not self.output_dir:
            raise ConfigError("output_dir cannot be empty.")
        if self.concurrency < 1:
            raise ConfigError("concurrency must be at least 1.")
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive.")
        if self.delay_secs < 0:
            raise ConfigError("delay_secs cannot be negative.")
        if self.max_links < 0:
            raise ConfigError("max_links cannot be negative.")
        try:
            re.compile(self.document_pattern)
        except re.error as e:
            raise ConfigError(f"Invalid document pattern: {e}") from e
        for name in ("title_selector", "content_selector"):
            try:
                soupsieve.compile(getattr(self, name))
            except soupsieve.SelectorSyntaxError as e:
                raise ConfigError(f"Invalid {name}: {e}") from e


class ArchiverController:
    def __init__(self,
                 config: RunConfig,
                 fetcher: Optional[HTMLRetriever] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            config: Run configuration, validated here
            fetcher: Anything with fetch(url) -> str; defaults to an HTMLRetriever
            logger: Logger to report to
        """
        config.validate()
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self._owns_fetcher = fetcher is None
        if fetcher is None:
            rate_limiter = TokenBucket.from_delay(config.delay_secs) if config.delay_secs > 0 else None
            fetcher = HTMLRetriever(timeout=config.timeout, user_agent=config.user_agent,
                                    rate_limiter=rate_limiter)
        self.fetcher = fetcher
        self.link_filter = LinkFilter(config.base_url, config.document_pattern)
        self.extractor = DocumentExtractor(config.title_selector, config.content_selector)
        self.files = FileManager(config.output_dir)
        self.manifest = Manifest(config.output_dir) if config.write_manifest else None

        self.phase: Optional[RunPhase] = None
        self._stop_event = threading.Event()
        self._progress_lock = threading.Lock()
        self._completed = 0
        self._progress: Optional[ProgressCallback] = None

    def stop(self):
        """Skip every post that has not started yet."""
        self._stop_event.set()

    def discover_links(self) -> List[str]:
        """Fetch the index page and return the post links on it."""
        self._set_phase(RunPhase.FETCHING_INDEX)
        try:
            index_html = self.fetcher.fetch(self.config.base_url)
        except FetchError as e:
            raise FatalPipelineError(f"Could not fetch index page {self.config.base_url}: {e}") from e

        self._set_phase(RunPhase.EXTRACTING_LINKS)
        links = self.link_filter.filter(extract_links(index_html))
        self.logger.info(f"Found {len(links)} post links")
        self.logger.debug(f"Post links: {links}")
        if not links:
            raise FatalPipelineError(f"No post links found on {self.config.base_url}")

        if self.config.max_links and len(links) > self.config.max_links:
            links = links[: self.config.max_links]
            self.logger.info(f"Processing the first {len(links)} links (max_links)")
        return links

    def run(self, progress: Optional[ProgressCallback] = None) -> RunReport:
        """
        Run the whole pipeline.

        progress, if given, receives event dicts:
        {"type": "phase", "phase": RunPhase}, {"type": "discovery", "total": n}
        and one {"type": "link", "completed": i, "total": n, "outcome": LinkOutcome}
        per finished post, with i strictly increasing.

        Raises:
            FatalPipelineError: if the index page yields nothing to process
        """
        self._progress = progress
        report = RunReport(base_url=self.config.base_url)
        try:
            links = self.discover_links()
            report.links_found = len(links)
            self._emit({"type": "discovery", "total": len(links)})

            self._set_phase(RunPhase.PROCESSING)
            report.outcomes = self._process_all(links)
        finally:
            if self._owns_fetcher:
                self.fetcher.close()

        report.finished_at = datetime.now()
        self._set_phase(RunPhase.DONE)
        self.logger.info(f"Run complete: {report.success_count} saved, {report.failure_count} failed")
        return report

    def _process_all(self, links: List[str]) -> List[LinkOutcome]:
        self._completed = 0
        outcomes: List[LinkOutcome] = []
        with ThreadPoolExecutor(max_workers=self.config.concurrency,
                                thread_name_prefix="archiver") as ex:
            futures = [ex.submit(self._process_one, url, len(links)) for url in links]
            for fut in as_completed(futures):
                outcomes.append(fut.result())
        return outcomes

    def _process_one(self, url: str, total: int) -> LinkOutcome:
        if self._stop_event.is_set():
            outcome = LinkOutcome(url=url, success=False, error="Run stopped before processing",
                                  error_type="Cancelled")
        else:
            try:
                html_content = self.fetcher.fetch(url)
                document = self.extractor.extract(html_content, url)
                saved_path = self.files.save_document(document)
                outcome = LinkOutcome.ok(url, str(saved_path))
            except ArchiverError as e:
                self.logger.error(f"Error processing {url}: {type(e).__name__}: {e}")
                outcome = LinkOutcome.failed(url, e)

        self._record(outcome, total)
        return outcome

    def _record(self, outcome: LinkOutcome, total: int) -> None:
        with self._progress_lock:
            self._completed += 1
            if self.manifest:
                self.manifest.record(outcome)
            self._emit({"type": "link", "completed": self._completed, "total": total, "outcome": outcome})

    def _set_phase(self, phase: RunPhase) -> None:
        self.phase = phase
        self.logger.debug(f"Phase: {phase.value}")
        self._emit({"type": "phase", "phase": phase})

    def _emit(self, event: Dict[str, Any]) -> None:
        if self._progress:
            self._progress(event)
