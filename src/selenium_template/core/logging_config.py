"""
Logging configuration for the Selenium driver utility layer.

This module provides structured logging configuration and a logger adapter
that prefixes every message with the short description of the test step
being executed.
"""

import logging
import logging.handlers
import json
import os
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import asdict, is_dataclass


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    EXTRA_FIELDS = (
        'step_description',
        'operation',
        'locator',
        'failure_kind',
        'success',
        'metadata'
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data['exception'] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info)
            }

        return json.dumps(log_data, default=self._json_serializer)

    def _json_serializer(self, obj):
        """Custom JSON serializer for complex objects."""
        if isinstance(obj, Enum):
            return obj.value
        elif is_dataclass(obj):
            return asdict(obj)
        elif hasattr(obj, 'isoformat'):  # datetime objects
            return obj.isoformat()
        else:
            return str(obj)


class StepLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with a step description."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Merge contextual information and prefix the step description."""
        extra = dict(self.extra)
        extra.update(kwargs.get('extra') or {})
        kwargs['extra'] = extra

        step_description = extra.get('step_description')
        if step_description and str(step_description).strip():
            msg = f"{step_description}: {msg}"
        return msg, kwargs

    def for_step(self, step_description: Optional[str]) -> 'StepLoggerAdapter':
        """Return an adapter bound to the given step description."""
        extra = dict(self.extra)
        extra['step_description'] = step_description
        return StepLoggerAdapter(self.logger, extra)

    def log_step_success(self, step_description: Optional[str], details: str, **metadata):
        """Log successful completion of a step."""
        self.info(details, extra={
            'step_description': step_description,
            'success': True,
            'metadata': metadata
        })

    def log_step_failure(self, step_description: Optional[str], details: str,
                         error: Optional[BaseException] = None, **metadata):
        """Log failure of a step, with the exception traceback when given."""
        exc_info = (type(error), error, error.__traceback__) if error is not None else None
        self.error(details, exc_info=exc_info, extra={
            'step_description': step_description,
            'success': False,
            'metadata': metadata
        })


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> Dict[str, logging.Logger]:
    """
    Set up structured logging for the driver layer.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory to store log files

    Returns:
        Dictionary of configured loggers
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, log_level.upper())

    # Get external library log levels from environment
    selenium_level = getattr(logging, os.getenv("SELENIUM_LOG_LEVEL", "WARNING").upper())
    urllib3_level = getattr(logging, os.getenv("URLLIB3_LOG_LEVEL", "WARNING").upper())
    wdm_level = getattr(logging, os.getenv("WDM_LOG_LEVEL", "WARNING").upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    structured_formatter = StructuredFormatter()
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    console_handler.setLevel(level)

    all_logs_handler = logging.handlers.RotatingFileHandler(
        log_path / "selenium_all.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    all_logs_handler.setFormatter(structured_formatter)
    all_logs_handler.setLevel(logging.DEBUG)

    error_handler = logging.handlers.RotatingFileHandler(
        log_path / "selenium_errors.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=10
    )
    error_handler.setFormatter(structured_formatter)
    error_handler.setLevel(logging.ERROR)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(all_logs_handler)

    loggers = {}

    package_logger = logging.getLogger("selenium_template")
    package_logger.addHandler(error_handler)
    loggers["selenium_template"] = package_logger

    # Report events get their own file
    reports_logger = logging.getLogger("selenium_template.reports")
    reports_handler = logging.handlers.RotatingFileHandler(
        log_path / "selenium_reports.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10
    )
    reports_handler.setFormatter(structured_formatter)
    reports_logger.addHandler(reports_handler)
    loggers["reports"] = reports_logger

    for name, library_level in (("selenium", selenium_level),
                                ("urllib3", urllib3_level),
                                ("WDM", wdm_level)):
        library_logger = logging.getLogger(name)
        library_logger.setLevel(library_level)
        loggers[name] = library_logger

    return loggers


def get_step_logger(component: str, step_description: Optional[str] = None) -> StepLoggerAdapter:
    """
    Get a step logger adapter for a component.

    Args:
        component: Component name (driver, locators, reporting, ...)
        step_description: Optional step description bound to every record

    Returns:
        StepLoggerAdapter instance
    """
    logger = logging.getLogger(f"selenium_template.{component}")

    extra = {}
    if step_description:
        extra['step_description'] = step_description

    return StepLoggerAdapter(logger, extra)
