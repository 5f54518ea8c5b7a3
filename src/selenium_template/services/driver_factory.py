"""Creation of configured WebDriver sessions."""

import logging
from typing import Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.firefox import GeckoDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from ..core.config_loader import get_driver_config
from ..core.models import Browser, DriverConfiguration
from .driver_controller import DriverController
from .reporting import ReportingProvider

logger = logging.getLogger(__name__)


class DriverCreationError(Exception):
    """Raised when a browser session cannot be started."""
    pass


class DriverFactory:
    """Starts Chrome, Edge or Firefox sessions from a DriverConfiguration."""

    def __init__(self, config: Optional[DriverConfiguration] = None):
        self.config = config or get_driver_config()

    def create_driver(self):
        """Start a new browser session.

        Returns:
            The WebDriver with page load and implicit timeouts applied

        Raises:
            DriverCreationError: If the browser is unsupported or fails to start
        """
        browser = self.config.browser
        if browser == Browser.CHROME:
            creator = self._create_chrome_driver
        elif browser == Browser.EDGE:
            creator = self._create_edge_driver
        elif browser == Browser.FIREFOX:
            creator = self._create_firefox_driver
        else:
            raise DriverCreationError(f"Unsupported browser: {browser}")

        try:
            driver = creator()
        except Exception as e:
            logger.error(f"Failed to create {browser.value} driver: {e}")
            raise DriverCreationError(f"Failed to create {browser.value} driver: {e}") from e

        try:
            driver.set_page_load_timeout(self.config.page_load_timeout)
            driver.implicitly_wait(self.config.implicit_wait)
        except Exception as e:
            logger.error(f"Failed to apply timeouts to {browser.value} driver: {e}")
            driver.quit()
            raise DriverCreationError(f"Failed to apply driver timeouts: {e}") from e

        logger.info(f"Created {browser.value} driver (headless={self.config.headless})")
        return driver

    def create_controller(self, reporter: Optional[ReportingProvider] = None) -> DriverController:
        """Start a new browser session and wrap it in a DriverController."""
        return DriverController(self.create_driver(), config=self.config, reporter=reporter)

    def _create_chrome_options(self) -> ChromeOptions:
        """Create Chrome options from the configuration."""
        options = ChromeOptions()
        if self.config.headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument(f"--window-size={self.config.window_size}")
        for argument in self.config.arguments:
            options.add_argument(argument)
        return options

    def _create_edge_options(self) -> EdgeOptions:
        """Create Edge options from the configuration."""
        options = EdgeOptions()
        if self.config.headless:
            options.add_argument("--headless=new")
        options.add_argument(f"--window-size={self.config.window_size}")
        for argument in self.config.arguments:
            options.add_argument(argument)
        return options

    def _create_firefox_options(self) -> FirefoxOptions:
        """Create Firefox options from the configuration."""
        options = FirefoxOptions()
        if self.config.headless:
            options.add_argument("-headless")
        width, height = (part.strip() for part in self.config.window_size.split(","))
        options.add_argument(f"--width={width}")
        options.add_argument(f"--height={height}")
        for argument in self.config.arguments:
            options.add_argument(argument)
        return options

    def _create_chrome_driver(self):
        options = self._create_chrome_options()
        # Without webdriver-manager Selenium Manager resolves the driver binary
        if self.config.use_webdriver_manager:
            service = ChromeService(ChromeDriverManager().install())
            return webdriver.Chrome(service=service, options=options)
        return webdriver.Chrome(options=options)

    def _create_edge_driver(self):
        options = self._create_edge_options()
        if self.config.use_webdriver_manager:
            service = EdgeService(EdgeChromiumDriverManager().install())
            return webdriver.Edge(service=service, options=options)
        return webdriver.Edge(options=options)

    def _create_firefox_driver(self):
        options = self._create_firefox_options()
        if self.config.use_webdriver_manager:
            service = FirefoxService(GeckoDriverManager().install())
            return webdriver.Firefox(service=service, options=options)
        return webdriver.Firefox(options=options)
