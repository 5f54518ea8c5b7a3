"""Selenium WebDriver utility layer with fallback locators and step reporting."""

from .core.models import DriverConfiguration, LocatorDescriptor, LocatorStrategy
from .services.driver_controller import DriverController
from .services.driver_factory import DriverCreationError, DriverFactory
from .services.locator_resolver import LocatorResolver, parse_locator_string, resolve_first

__version__ = "1.0.0"

__all__ = [
    "DriverConfiguration",
    "DriverController",
    "DriverCreationError",
    "DriverFactory",
    "LocatorDescriptor",
    "LocatorResolver",
    "LocatorStrategy",
    "parse_locator_string",
    "resolve_first",
]
