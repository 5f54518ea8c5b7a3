"""
Reporting providers for browser steps.

The driver controller reports each step as a success or a failure, with an
optional PNG screenshot and the exception that caused the failure. A
provider decides where those events go: Allure steps, a log file, or
anything implementing :class:`ReportingProvider`.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import suppress
from typing import Optional

import allure
import pytest
from allure_commons.model2 import Status
from allure_commons.types import AttachmentType

from ..core.models import ReportStatus

logger = logging.getLogger(__name__)


class ReportingProviderNotSetError(RuntimeError):
    """Raised when a report helper is used before a provider was registered."""

    def __init__(self):
        super().__init__(
            "Reporting provider has not been set. "
            "Register one with selenium_template.services.reporting.set_provider()."
        )


class StepFailedError(Exception):
    """Marks a reported step as broken when no exception was supplied."""
    pass


def format_details(step_description: Optional[str], details: str) -> str:
    """Prefix ``details`` with the step description when there is one."""
    if step_description and step_description.strip():
        return f"{step_description}: {details}"
    return details


class ReportingProvider(ABC):
    """Sink for step success and failure events."""

    @abstractmethod
    def report_step_success(self, step_description: Optional[str], details: str,
                            screenshot: Optional[bytes] = None) -> None:
        """Record a successful step."""

    @abstractmethod
    def report_step_failure(self, step_description: Optional[str], details: str,
                            exception: Optional[BaseException] = None,
                            screenshot: Optional[bytes] = None) -> None:
        """Record a failed step."""

    def log(self, status: ReportStatus, step_description: Optional[str], details: str,
            screenshot: Optional[bytes] = None) -> None:
        """Record a step with an explicit status."""
        if status.is_failure:
            self.report_step_failure(step_description, details, screenshot=screenshot)
        else:
            self.report_step_success(step_description, details, screenshot=screenshot)


ALLURE_STATUSES = {
    ReportStatus.DEBUG: Status.PASSED,
    ReportStatus.INFO: Status.PASSED,
    ReportStatus.PASS: Status.PASSED,
    ReportStatus.WARNING: Status.BROKEN,
    ReportStatus.ERROR: Status.BROKEN,
    ReportStatus.FAIL: Status.FAILED,
    ReportStatus.FATAL: Status.FAILED,
    ReportStatus.SKIP: Status.SKIPPED,
}


class AllureReportingProvider(ReportingProvider):
    """Reports steps into the running Allure test result.

    allure-pytest derives a step's status from the exception leaving it:
    none is passed, ``AssertionError`` is failed, pytest's skip outcome is
    skipped and anything else is broken.
    """

    def report_step_success(self, step_description, details, screenshot=None):
        with allure.step(format_details(step_description, details)):
            self._attach_screenshot(step_description, screenshot)

    def report_step_failure(self, step_description, details, exception=None, screenshot=None):
        failure = exception if exception is not None else StepFailedError(details)
        self._close_step_with(step_description, details, failure, screenshot)

    def log(self, status, step_description, details, screenshot=None):
        allure_status = ALLURE_STATUSES[status]
        if allure_status == Status.PASSED:
            self.report_step_success(step_description, details, screenshot)
            return

        if allure_status == Status.FAILED:
            outcome = AssertionError(details)
        elif allure_status == Status.SKIPPED:
            outcome = pytest.skip.Exception(details)
        else:
            outcome = StepFailedError(details)
        self._close_step_with(step_description, details, outcome, screenshot)

    def _close_step_with(self, step_description: Optional[str], details: str,
                         outcome: BaseException, screenshot: Optional[bytes]):
        with suppress(type(outcome)):
            with allure.step(format_details(step_description, details)):
                self._attach_screenshot(step_description, screenshot)
                raise outcome

    def _attach_screenshot(self, step_description: Optional[str], screenshot: Optional[bytes]):
        if screenshot:
            allure.attach(
                screenshot,
                name=step_description or "screenshot",
                attachment_type=AttachmentType.PNG
            )


class LoggingReportingProvider(ReportingProvider):
    """Writes report events to the ``selenium_template.reports`` logger."""

    def __init__(self, report_logger: Optional[logging.Logger] = None):
        self.report_logger = report_logger or logging.getLogger("selenium_template.reports")

    def report_step_success(self, step_description, details, screenshot=None):
        self.report_logger.info(format_details(step_description, details), extra={
            'step_description': step_description,
            'success': True,
            'metadata': {'screenshot_bytes': len(screenshot) if screenshot else 0}
        })

    def report_step_failure(self, step_description, details, exception=None, screenshot=None):
        exc_info = (type(exception), exception, exception.__traceback__) if exception is not None else None
        self.report_logger.error(format_details(step_description, details), exc_info=exc_info, extra={
            'step_description': step_description,
            'success': False,
            'metadata': {'screenshot_bytes': len(screenshot) if screenshot else 0}
        })


# Global provider used when a controller is not given one explicitly
_provider: Optional[ReportingProvider] = None


def set_provider(provider: Optional[ReportingProvider]) -> None:
    """Register the global reporting provider."""
    global _provider
    _provider = provider
    if provider is not None:
        logger.info(f"Reporting provider set to {type(provider).__name__}")


def get_provider(required: bool = True) -> Optional[ReportingProvider]:
    """Return the global reporting provider.

    Args:
        required: Raise when no provider is registered

    Raises:
        ReportingProviderNotSetError: If ``required`` and no provider is set
    """
    if _provider is None and required:
        raise ReportingProviderNotSetError()
    return _provider


def clear_provider() -> None:
    set_provider(None)


def report_step_success(step_description: Optional[str], details: str,
                        screenshot: Optional[bytes] = None) -> None:
    """Report a successful step through the global provider."""
    get_provider().report_step_success(step_description, details, screenshot)


def report_step_failure(step_description: Optional[str], details: str,
                        exception: Optional[BaseException] = None,
                        screenshot: Optional[bytes] = None) -> None:
    """Report a failed step through the global provider."""
    get_provider().report_step_failure(step_description, details, exception, screenshot)
