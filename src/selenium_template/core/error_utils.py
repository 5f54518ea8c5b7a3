"""Utility functions for classifying errors raised by the browser session."""

from typing import Optional

from selenium.common.exceptions import (
    WebDriverException,
    TimeoutException,
    NoSuchElementException,
    StaleElementReferenceException,
    InvalidSelectorException,
    ElementNotInteractableException,
    NoSuchWindowException,
    NoSuchFrameException,
    NoAlertPresentException
)

from .models.driver_models import FailureKind


# Checked in order; subclasses come before their bases.
_EXCEPTION_KINDS = (
    (TimeoutException, FailureKind.TIMEOUT),
    (InvalidSelectorException, FailureKind.INVALID_SELECTOR),
    (NoSuchWindowException, FailureKind.NO_SUCH_WINDOW),
    (NoSuchFrameException, FailureKind.NO_SUCH_FRAME),
    (NoAlertPresentException, FailureKind.NO_ALERT),
    (NoSuchElementException, FailureKind.ELEMENT_NOT_FOUND),
    (StaleElementReferenceException, FailureKind.STALE_ELEMENT),
    (ElementNotInteractableException, FailureKind.ELEMENT_NOT_INTERACTABLE),
)


def classify_exception(error: Optional[BaseException]) -> FailureKind:
    """Classify an exception raised by a Selenium call.

    Args:
        error: Exception caught around a browser call

    Returns:
        FailureKind: Classified failure kind
    """
    if error is None:
        return FailureKind.OTHER

    for exception_type, kind in _EXCEPTION_KINDS:
        if isinstance(error, exception_type):
            return kind

    if isinstance(error, WebDriverException):
        return _classify_by_message(str(error))

    return FailureKind.OTHER


def _classify_by_message(message: str) -> FailureKind:
    """Fallback classification for generic WebDriverException messages."""
    message_lower = message.lower()

    if "no such element" in message_lower or "unable to locate element" in message_lower:
        return FailureKind.ELEMENT_NOT_FOUND

    if "stale element" in message_lower:
        return FailureKind.STALE_ELEMENT

    if "invalid selector" in message_lower:
        return FailureKind.INVALID_SELECTOR

    if "no such alert" in message_lower:
        return FailureKind.NO_ALERT

    return FailureKind.SESSION_ERROR


def describe_exception(error: BaseException) -> str:
    """One-line description of an exception for log and report messages."""
    if isinstance(error, WebDriverException):
        # str() of a WebDriverException adds a "Message:" header and stacktrace
        message = (error.msg or "").strip()
    else:
        message = str(error).strip()
    detail = message.splitlines()[0] if message else ""

    name = type(error).__name__
    return f"{name}: {detail}" if detail else name
