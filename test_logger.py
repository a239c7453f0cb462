#!/usr/bin/env python3
"""
Logging setup tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add the src directory to the path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from blog_archiver.core.logger import initialize_logging, get_logger, APP_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(APP_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_file_logs_written(tmp_path):
    initialize_logging(tmp_path / "logs", logging.WARNING)
    logger = get_logger("test")
    assert logger.name == "blog_archiver.test"

    logger.info("informational line")
    logger.error("something broke")
    for handler in logging.getLogger(APP_LOGGER_NAME).handlers:
        handler.flush()

    main_log = (tmp_path / "logs" / "blog_archiver.log").read_text(encoding="utf-8")
    error_log = (tmp_path / "logs" / "blog_archiver_errors.log").read_text(encoding="utf-8")
    assert "informational line" in main_log and "something broke" in main_log
    assert "something broke" in error_log and "informational line" not in error_log


def test_module_loggers_propagate_to_app_logger(tmp_path):
    initialize_logging(tmp_path, logging.DEBUG)
    logging.getLogger("blog_archiver.core.controller").warning("from a module")
    for handler in logging.getLogger(APP_LOGGER_NAME).handlers:
        handler.flush()
    assert "from a module" in (tmp_path / "blog_archiver.log").read_text(encoding="utf-8")


def test_reinitializing_replaces_handlers():
    initialize_logging(None)
    initialize_logging(None)
    assert len(logging.getLogger(APP_LOGGER_NAME).handlers) == 1
