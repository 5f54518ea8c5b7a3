"""Expected conditions missing from ``selenium.webdriver.support.expected_conditions``.

Each function returns a predicate for ``WebDriverWait.until`` and accepts
either a native locator tuple or an already located ``WebElement``.
"""

from typing import Callable, Tuple, Union

from selenium.common.exceptions import StaleElementReferenceException
from selenium.webdriver.remote.webelement import WebElement

Target = Union[Tuple[str, str], WebElement]


def _element(driver, target: Target) -> WebElement:
    if isinstance(target, WebElement):
        return target
    return driver.find_element(*target)


def attribute_to_be(target: Target, attribute: str, value: str) -> Callable:
    """An expectation that the element's attribute (or property) equals ``value``."""

    def _predicate(driver):
        try:
            return _element(driver, target).get_attribute(attribute) == value
        except StaleElementReferenceException:
            return False

    return _predicate


def attribute_to_contain(target: Target, attribute: str, value: str) -> Callable:
    """An expectation that the element's attribute (or property) contains ``value``."""

    def _predicate(driver):
        try:
            actual = _element(driver, target).get_attribute(attribute)
            return actual is not None and value in actual
        except StaleElementReferenceException:
            return False

    return _predicate
