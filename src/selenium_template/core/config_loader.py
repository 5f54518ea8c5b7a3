"""Configuration loading and validation utilities for the driver layer."""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .models.driver_models import DriverConfiguration, Browser
from .config import settings

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class DriverConfigLoader:
    """Loads and validates driver configuration."""

    DEFAULT_CONFIG = {
        "driver": {
            "browser": "chrome",
            "headless": True,
            "window_size": "1920,1080",
            "arguments": [],
            "use_webdriver_manager": True
        },
        "timeouts": {
            "explicit_wait": 10,
            "poll_frequency": 0.5,
            "page_load": 30,
            "implicit_wait": 0
        },
        "reporting": {
            "enabled": True,
            "success_screenshots": False,
            "failure_screenshots": True
        }
    }

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config loader with optional custom path."""
        self.config_path = Path(
            config_path or settings.DRIVER_CONFIG_PATH)
        self._config_cache: Optional[DriverConfiguration] = None
        self._config_file_mtime: Optional[float] = None

    def load_config(self, force_reload: bool = False) -> DriverConfiguration:
        """Load and validate driver configuration.

        Args:
            force_reload: Force reload even if cached config exists

        Returns:
            DriverConfiguration: Validated configuration object

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not force_reload and self._config_cache and self._is_config_current():
            return self._config_cache

        try:
            config_data = self._load_config_file()
            driver_config = self._parse_driver_config(config_data)
            self._validate_config(driver_config)

            self._config_cache = driver_config
            if self.config_path.exists():
                self._config_file_mtime = self.config_path.stat().st_mtime
            else:
                self._config_file_mtime = None

            logger.info(
                f"Loaded driver configuration from {self.config_path}")
            return driver_config

        except ConfigurationError as e:
            logger.error(f"Failed to load driver configuration: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to load driver configuration: {e}")
            raise ConfigurationError(
                f"Configuration loading failed: {e}") from e

    def save_config(self, config: DriverConfiguration) -> None:
        """Save configuration to file.

        Args:
            config: Configuration to save

        Raises:
            ConfigurationError: If saving fails
        """
        try:
            self._validate_config(config)

            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.dump(self._config_to_dict(config), f,
                          default_flow_style=False, indent=2)

            self._config_cache = config
            self._config_file_mtime = self.config_path.stat().st_mtime

            logger.info(
                f"Saved driver configuration to {self.config_path}")

        except Exception as e:
            logger.error(f"Failed to save driver configuration: {e}")
            raise ConfigurationError(
                f"Configuration saving failed: {e}") from e

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration from file or return defaults."""
        if not self.config_path.exists():
            logger.info(
                f"Config file {self.config_path} not found, using defaults")
            return copy.deepcopy(self.DEFAULT_CONFIG)

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Config file {self.config_path} must contain a mapping")

        # Merge with defaults to ensure all keys exist
        return self._deep_merge(copy.deepcopy(self.DEFAULT_CONFIG), config_data)

    def _parse_driver_config(self, config_data: Dict[str, Any]) -> DriverConfiguration:
        """Parse configuration data into DriverConfiguration object."""
        driver = config_data.get("driver", {})
        timeouts = config_data.get("timeouts", {})
        reporting = config_data.get("reporting", {})

        browser_name = str(driver.get("browser", "chrome")).lower()
        try:
            browser = Browser(browser_name)
        except ValueError:
            raise ConfigurationError(f"Unsupported browser: {browser_name}")

        arguments = driver.get("arguments") or []
        if not isinstance(arguments, list):
            raise ConfigurationError("driver.arguments must be a list")

        try:
            return DriverConfiguration(
                browser=browser,
                headless=bool(driver.get("headless", True)),
                window_size=str(driver.get("window_size", "1920,1080")),
                arguments=[str(a) for a in arguments],
                use_webdriver_manager=bool(
                    driver.get("use_webdriver_manager", True)),
                explicit_wait=float(timeouts.get("explicit_wait", 10)),
                poll_frequency=float(timeouts.get("poll_frequency", 0.5)),
                page_load_timeout=float(timeouts.get("page_load", 30)),
                implicit_wait=float(timeouts.get("implicit_wait", 0)),
                reporting_enabled=bool(reporting.get("enabled", True)),
                success_screenshots=bool(
                    reporting.get("success_screenshots", False)),
                failure_screenshots=bool(
                    reporting.get("failure_screenshots", True))
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}")

    def _config_to_dict(self, config: DriverConfiguration) -> Dict[str, Any]:
        """Convert DriverConfiguration to nested dictionary structure."""
        return {
            "driver": {
                "browser": config.browser.value,
                "headless": config.headless,
                "window_size": config.window_size,
                "arguments": list(config.arguments),
                "use_webdriver_manager": config.use_webdriver_manager
            },
            "timeouts": {
                "explicit_wait": config.explicit_wait,
                "poll_frequency": config.poll_frequency,
                "page_load": config.page_load_timeout,
                "implicit_wait": config.implicit_wait
            },
            "reporting": {
                "enabled": config.reporting_enabled,
                "success_screenshots": config.success_screenshots,
                "failure_screenshots": config.failure_screenshots
            }
        }

    def _validate_config(self, config: DriverConfiguration) -> None:
        """Validate configuration values.

        Args:
            config: Configuration to validate

        Raises:
            ConfigurationError: If validation fails
        """
        errors = []

        if config.explicit_wait < 0 or config.explicit_wait > 300:
            errors.append("explicit_wait must be between 0 and 300 seconds")

        if config.poll_frequency <= 0 or config.poll_frequency >= 1:
            errors.append(
                "poll_frequency must be greater than 0 and less than 1 second")

        if config.page_load_timeout <= 0 or config.page_load_timeout > 600:
            errors.append(
                "page_load_timeout must be between 0 and 600 seconds")

        if config.implicit_wait < 0 or config.implicit_wait > 60:
            errors.append("implicit_wait must be between 0 and 60 seconds")

        if not self._is_valid_window_size(config.window_size):
            errors.append(
                "window_size must be two positive integers such as '1920,1080'")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed: " + "; ".join(errors))

    @staticmethod
    def _is_valid_window_size(window_size: str) -> bool:
        parts = window_size.split(",")
        if len(parts) != 2:
            return False
        return all(part.strip().isdigit() and int(part) > 0 for part in parts)

    def _is_config_current(self) -> bool:
        """Check if cached config is still current."""
        if not self.config_path.exists():
            return self._config_file_mtime is None

        current_mtime = self.config_path.stat().st_mtime
        return self._config_file_mtime == current_mtime

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


# Global config loader instance
config_loader = DriverConfigLoader()


def get_driver_config(force_reload: bool = False) -> DriverConfiguration:
    """Get the current driver configuration with environment overrides applied.

    Args:
        force_reload: Force reload from file

    Returns:
        DriverConfiguration: Current configuration
    """
    config = DriverConfiguration.from_dict(
        config_loader.load_config(force_reload).to_dict())

    if settings.BROWSER:
        config.browser = Browser(settings.BROWSER)
    if settings.HEADLESS is not None:
        config.headless = settings.HEADLESS
    if not settings.REPORTING_ENABLED:
        config.reporting_enabled = False

    return config


def save_driver_config(config: DriverConfiguration) -> None:
    """Save driver configuration.

    Args:
        config: Configuration to save
    """
    config_loader.save_config(config)


def create_default_config_file() -> None:
    """Create a default configuration file if it doesn't exist."""
    if not config_loader.config_path.exists():
        config_loader.save_config(DriverConfiguration())
        logger.info(
            f"Created default driver config at {config_loader.config_path}")
