"""
Logging Configuration

Centralized logging setup for blog-archiver. Library modules only call
logging.getLogger(__name__); handlers are attached here, once, by the
application entry point.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional, Dict, Union


APP_LOGGER_NAME = "blog_archiver"


class ArchiverLogger:
    """
    Sets up the application logger with rotating file logs and a console.

    - <log_dir>/blog_archiver.log: everything from DEBUG up
    - <log_dir>/blog_archiver_errors.log: ERROR and above
    - stderr: the configured console level
    """

    def __init__(self, log_dir: Union[str, Path] = "logs", app_name: str = APP_LOGGER_NAME):
        """
        Args:
            log_dir: Directory to store log files, None for console only
            app_name: Name of the application logger
        """
        self.log_dir = Path(log_dir) if log_dir else None
        self.app_name = app_name
        self.loggers: Dict[str, logging.Logger] = {}

    def setup_logger(self, level: int = logging.INFO) -> logging.Logger:
        """
        Attach handlers to the application logger.

        Calling this again replaces the handlers from the previous call.

        Args:
            level: Console logging level

        Returns:
            The configured application logger
        """
        logger = logging.getLogger(self.app_name)
        logger.setLevel(logging.DEBUG)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(threadName)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{self.app_name}.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            logger.addHandler(file_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{self.app_name}_errors.log",
                maxBytes=5*1024*1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(detailed_formatter)
            logger.addHandler(error_handler)

        self.loggers['main'] = logger
        return logger

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a child of the application logger.

        Args:
            name: Name of the module/component

        Returns:
            Logger instance for the module
        """
        full_name = name if name.startswith(self.app_name) else f"{self.app_name}.{name}"
        if full_name not in self.loggers:
            self.loggers[full_name] = logging.getLogger(full_name)
        return self.loggers[full_name]

    def log_system_info(self):
        """Log environment details at DEBUG for bug reports."""
        logger = self.get_logger('system')
        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Platform: {sys.platform}")
        logger.debug(f"Working directory: {os.getcwd()}")
        if self.log_dir is not None:
            logger.debug(f"Log directory: {self.log_dir.absolute()}")


_logger_instance: Optional[ArchiverLogger] = None


def initialize_logging(log_dir: Optional[Union[str, Path]] = "logs", level: int = logging.INFO) -> logging.Logger:
    """
    Initialize the global logging system.

    Args:
        log_dir: Directory for log files, None to log to the console only
        level: Console logging level
    """
    global _logger_instance
    _logger_instance = ArchiverLogger(log_dir)
    logger = _logger_instance.setup_logger(level)
    _logger_instance.log_system_info()
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the application namespace.

    Does not configure handlers; call initialize_logging first for output.
    """
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = ArchiverLogger(None)
    return _logger_instance.get_logger(name or 'main')
