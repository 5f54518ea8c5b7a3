"""
Services for the Selenium driver utility layer.

This module contains:
- locator_resolver.py: Locator string parsing and first-match resolution
- conditions.py: Attribute expected conditions
- driver_controller.py: Browser operations that never raise
- driver_factory.py: Creation of configured WebDriver sessions
- reporting.py: Step reporting providers
"""

__all__ = ["locator_resolver", "conditions", "driver_controller", "driver_factory", "reporting"]
