"""
Core module for the Selenium driver utility layer.

This module contains:
- config.py: Environment settings
- config_loader.py: YAML driver configuration
- logging_config.py: Logging configuration
- error_utils.py: Classification of browser session errors
- models: Enums, locator descriptors and configuration dataclasses
"""

__all__ = ["config", "config_loader", "logging_config", "error_utils", "models"]
