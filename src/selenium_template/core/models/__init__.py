"""Core data models for the Selenium driver utility layer."""

from .driver_models import (
    LocatorStrategy,
    LocatorDescriptor,
    LocatorAttempt,
    DriverConfiguration,
    Browser,
    WindowType,
    ReportStatus,
    FailureKind
)

__all__ = [
    "LocatorStrategy",
    "LocatorDescriptor",
    "LocatorAttempt",
    "DriverConfiguration",
    "Browser",
    "WindowType",
    "ReportStatus",
    "FailureKind"
]
