"""
Pytest configuration and shared fixtures for the test suite.
"""

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest
from selenium.webdriver.remote.webelement import WebElement

# Add the package source and the project root (for tests.utils) to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(project_root))

from selenium_template.core.models import DriverConfiguration  # noqa: E402
from selenium_template.services import reporting  # noqa: E402


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@pytest.fixture(autouse=True)
def reset_reporting_provider():
    """Make sure no test leaks a global reporting provider into another."""
    reporting.clear_provider()
    yield
    reporting.clear_provider()


@pytest.fixture
def fast_config():
    """Driver configuration with waits short enough for unit tests."""
    return DriverConfiguration(explicit_wait=0.1, poll_frequency=0.05)


@pytest.fixture
def mock_element():
    """A displayed and enabled web element."""
    element = Mock(spec=WebElement)
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    return element


@pytest.fixture
def mock_driver(mock_element):
    """A WebDriver whose lookups all return ``mock_element``."""
    driver = MagicMock()
    driver.find_element.return_value = mock_element
    driver.find_elements.return_value = [mock_element]
    driver.get_screenshot_as_png.return_value = b"\x89PNG"
    driver.title = "Example Domain"
    driver.current_url = "https://example.com/"
    driver.current_window_handle = "handle-1"
    driver.window_handles = ["handle-1", "handle-2"]
    return driver


@pytest.fixture
def mock_reporter():
    """A reporting provider recording every call."""
    return Mock(spec=reporting.ReportingProvider)
