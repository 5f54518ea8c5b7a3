"""Unit tests for reporting providers and the global provider registry."""

import logging
from unittest.mock import Mock, call, patch

import allure_commons
import pytest
from allure_commons.model2 import Status
from allure_pytest.utils import get_status
from selenium.common.exceptions import NoSuchElementException

from selenium_template.core.models import ReportStatus
from selenium_template.services import reporting
from selenium_template.services.reporting import (
    ALLURE_STATUSES,
    AllureReportingProvider,
    LoggingReportingProvider,
    ReportingProviderNotSetError,
    StepFailedError,
    format_details
)

REPORTING_MODULE = "selenium_template.services.reporting"


class TestFormatDetails:
    """Test format_details."""

    def test_with_step(self):
        assert format_details("Login", "clicked") == "Login: clicked"

    def test_without_step(self):
        assert format_details(None, "clicked") == "clicked"
        assert format_details("  ", "clicked") == "clicked"


class TestProviderRegistry:
    """Test set_provider / get_provider."""

    def test_helpers_without_provider_raise(self):
        with pytest.raises(ReportingProviderNotSetError):
            reporting.report_step_success("Login", "clicked")

        with pytest.raises(ReportingProviderNotSetError):
            reporting.report_step_failure("Login", "missing")

    def test_optional_lookup_returns_none(self):
        assert reporting.get_provider(required=False) is None

    def test_helpers_delegate_to_provider(self):
        provider = Mock(spec=reporting.ReportingProvider)
        reporting.set_provider(provider)
        error = NoSuchElementException("missing")

        reporting.report_step_success("Login", "clicked", b"png")
        reporting.report_step_failure("Login", "missing", error)

        provider.report_step_success.assert_called_once_with("Login", "clicked", b"png")
        provider.report_step_failure.assert_called_once_with("Login", "missing", error, None)

    def test_clear_provider(self):
        reporting.set_provider(Mock(spec=reporting.ReportingProvider))

        reporting.clear_provider()

        assert reporting.get_provider(required=False) is None


class TestReportingProviderLog:
    """Test the status based log helper."""

    def setup_method(self):
        self.provider = LoggingReportingProvider(Mock())
        self.provider.report_step_success = Mock()
        self.provider.report_step_failure = Mock()

    @pytest.mark.parametrize("status", [ReportStatus.PASS, ReportStatus.INFO, ReportStatus.SKIP])
    def test_non_failure_status(self, status):
        self.provider.log(status, "Login", "ok")

        self.provider.report_step_success.assert_called_once_with("Login", "ok", screenshot=None)

    @pytest.mark.parametrize("status", [ReportStatus.FAIL, ReportStatus.ERROR, ReportStatus.WARNING])
    def test_failure_status(self, status):
        self.provider.log(status, "Login", "bad", b"png")

        self.provider.report_step_failure.assert_called_once_with("Login", "bad", screenshot=b"png")


class TestAllureReportingProvider:
    """Test the Allure provider."""

    @patch(f"{REPORTING_MODULE}.allure")
    def test_success_creates_step_and_attachment(self, mock_allure):
        AllureReportingProvider().report_step_success("Login", "clicked", b"png")

        mock_allure.step.assert_called_once_with("Login: clicked")
        mock_allure.attach.assert_called_once()
        assert mock_allure.attach.call_args.args[0] == b"png"

    @patch(f"{REPORTING_MODULE}.allure")
    def test_success_without_screenshot(self, mock_allure):
        AllureReportingProvider().report_step_success("Login", "clicked")

        mock_allure.attach.assert_not_called()

    @patch(f"{REPORTING_MODULE}.allure")
    def test_failure_does_not_raise(self, mock_allure):
        error = NoSuchElementException("missing")

        AllureReportingProvider().report_step_failure("Login", "not found", error, b"png")

        mock_allure.step.assert_called_once_with("Login: not found")
        step_context = mock_allure.step.return_value
        exit_args = step_context.__exit__.call_args.args
        assert exit_args[0] is NoSuchElementException
        assert exit_args[1] is error

    @patch(f"{REPORTING_MODULE}.allure")
    def test_failure_without_exception_uses_step_failed_error(self, mock_allure):
        AllureReportingProvider().report_step_failure("Login", "not found")

        exit_args = mock_allure.step.return_value.__exit__.call_args.args
        assert exit_args[0] is StepFailedError

    def test_failure_with_real_allure_step(self):
        AllureReportingProvider().report_step_failure("Login", "not found", ValueError("bad"))


class AllureStepRecorder:
    """Allure hook implementation recording steps with the status allure-pytest would give them."""

    def __init__(self):
        self.steps = []

    @allure_commons.hookimpl
    def start_step(self, uuid, title, params):
        self.steps.append({'title': title, 'status': None})

    @allure_commons.hookimpl
    def stop_step(self, uuid, exc_type, exc_val, exc_tb):
        self.steps[-1]['status'] = get_status(exc_val)


@pytest.fixture
def allure_steps():
    recorder = AllureStepRecorder()
    allure_commons.plugin_manager.register(recorder)
    yield recorder.steps
    allure_commons.plugin_manager.unregister(recorder)


class TestAllureStatusMapping:
    """Test that every ReportStatus ends up with its Allure status."""

    @pytest.mark.parametrize("status,expected", [
        (ReportStatus.PASS, Status.PASSED),
        (ReportStatus.INFO, Status.PASSED),
        (ReportStatus.DEBUG, Status.PASSED),
        (ReportStatus.WARNING, Status.BROKEN),
        (ReportStatus.ERROR, Status.BROKEN),
        (ReportStatus.FAIL, Status.FAILED),
        (ReportStatus.FATAL, Status.FAILED),
        (ReportStatus.SKIP, Status.SKIPPED),
    ])
    def test_log_status(self, allure_steps, status, expected):
        AllureReportingProvider().log(status, "Checkout", "step outcome")

        assert allure_steps == [{'title': "Checkout: step outcome", 'status': expected}]

    def test_every_status_is_mapped(self):
        assert set(ALLURE_STATUSES) == set(ReportStatus)

    def test_failure_with_exception_is_broken(self, allure_steps):
        AllureReportingProvider().report_step_failure("Login", "not found", NoSuchElementException("missing"))

        assert allure_steps[0]['status'] == Status.BROKEN


class TestLoggingReportingProvider:
    """Test the logging provider."""

    def test_success_is_info(self, caplog):
        caplog.set_level(logging.INFO, logger="selenium_template.reports")

        LoggingReportingProvider().report_step_success("Login", "clicked", b"1234")

        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage() == "Login: clicked"
        assert record.metadata == {'screenshot_bytes': 4}

    def test_failure_is_error_with_exception(self, caplog):
        caplog.set_level(logging.INFO, logger="selenium_template.reports")
        error = NoSuchElementException("missing")

        LoggingReportingProvider().report_step_failure("Login", "not found", error)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.success is False
        assert record.exc_info[1] is error

    def test_custom_logger(self):
        report_logger = Mock()

        LoggingReportingProvider(report_logger).report_step_success(None, "clicked")

        assert report_logger.info.call_args == call("clicked", extra={
            'step_description': None,
            'success': True,
            'metadata': {'screenshot_bytes': 0}
        })
