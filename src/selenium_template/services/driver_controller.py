"""Selenium operations wrapped with exception handling, logging and reporting."""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import Select, WebDriverWait

from ..core.error_utils import classify_exception, describe_exception
from ..core.logging_config import get_step_logger
from ..core.models import DriverConfiguration, WindowType
from . import reporting
from .conditions import attribute_to_be, attribute_to_contain
from .locator_resolver import LocatorResolver, attempt
from .reporting import ReportingProvider

Locator = Tuple[str, str]
Target = Union[str, Locator, WebElement]

# Builds an expected condition for a native locator or for a located element
ConditionFactory = Callable[[Any], Callable]


@dataclass
class ReportingOptions:
    """Switches controlling what the controller sends to its reporting provider."""
    enabled: bool = True
    success_screenshots: bool = False
    failure_screenshots: bool = True


class Timeouts:
    """Default explicit wait of the controller plus the driver's own timeouts."""

    def __init__(self, controller: 'DriverController'):
        self._controller = controller

    @property
    def default_explicit_wait(self) -> float:
        return self._controller._default_explicit_wait

    @default_explicit_wait.setter
    def default_explicit_wait(self, seconds: float):
        if seconds is None or seconds < 0:
            raise ValueError(f"default explicit wait must be non-negative, got {seconds}")
        self._controller._default_explicit_wait = float(seconds)

    def set_page_load(self, seconds: float) -> bool:
        """Set the page load timeout of the driver."""
        return self._controller._call(
            "Set page load timeout",
            lambda: self._controller.driver.set_page_load_timeout(seconds),
            f"Successfully set page load timeout to {seconds}s",
            "Exception occurred while setting page load timeout"
        )

    def get_page_load(self) -> Optional[float]:
        """Page load timeout of the driver in seconds, None on failure."""
        return self._controller._fetch(
            "Get page load timeout",
            lambda: self._controller.driver.timeouts.page_load,
            "Exception occurred while getting page load timeout"
        )

    def set_implicit_wait(self, seconds: float) -> bool:
        """Set the implicit wait of the driver."""
        return self._controller._call(
            "Set implicit wait",
            lambda: self._controller.driver.implicitly_wait(seconds),
            f"Successfully set implicit wait to {seconds}s",
            "Exception occurred while setting implicit wait"
        )

    def get_implicit_wait(self) -> Optional[float]:
        """Implicit wait of the driver in seconds, None on failure."""
        return self._controller._fetch(
            "Get implicit wait",
            lambda: self._controller.driver.timeouts.implicit_wait,
            "Exception occurred while getting implicit wait"
        )


class DriverController:
    """
    Browser operations that never raise.

    Every operation takes a short step description, used to prefix log
    records and report entries, and returns True/False, the requested value,
    None or an empty list. Elements can be addressed by a locator string
    (``"id~q;css~input[name='q']"``), a native locator tuple
    (``(By.ID, "q")``) or a ``WebElement``.
    """

    def __init__(
        self,
        driver,
        config: Optional[DriverConfiguration] = None,
        reporter: Optional[ReportingProvider] = None,
        resolver: Optional[LocatorResolver] = None
    ):
        """Initialize the controller around an existing WebDriver session."""
        self._driver = driver
        self.config = config or DriverConfiguration()
        self.reporter = reporter
        self.resolver = resolver or LocatorResolver()
        self.reporting = ReportingOptions(
            enabled=self.config.reporting_enabled,
            success_screenshots=self.config.success_screenshots,
            failure_screenshots=self.config.failure_screenshots
        )
        self.poll_frequency = self.config.poll_frequency
        self._default_explicit_wait = self.config.explicit_wait
        self.logger = get_step_logger("driver")

    @property
    def driver(self):
        """The WebDriver this controller operates on."""
        return self._driver

    @property
    def timeouts(self) -> Timeouts:
        return Timeouts(self)

    # navigation

    def get(self, step_description: str, url: str) -> bool:
        """Load a new web page in the current browser window."""
        if not self._is_not_blank(url):
            return self._fail(step_description, f"Blank url: '{url}'")
        return self._call(
            step_description,
            lambda: self._driver.get(url),
            f"Successfully loaded url: {url}",
            f"Exception occurred while loading url: {url}"
        )

    def close(self, step_description: str) -> bool:
        """Close the current window, quitting the browser if it is the last one."""
        return self._call(
            step_description,
            self._driver.close,
            "Successfully closed current window",
            "Exception occurred while closing current window",
            capture_screenshot=False
        )

    def quit(self, step_description: str) -> bool:
        """Quit the driver, closing every associated window."""
        return self._call(
            step_description,
            self._driver.quit,
            "Successfully quit web driver",
            "Exception occurred while quitting web driver",
            capture_screenshot=False
        )

    def get_title(self, step_description: str) -> Optional[str]:
        return self._fetch(step_description, lambda: self._driver.title,
                           "Exception occurred while getting title", "title")

    def get_current_url(self, step_description: str) -> Optional[str]:
        return self._fetch(step_description, lambda: self._driver.current_url,
                           "Exception occurred while getting current page url", "current page url")

    def get_window_handle(self, step_description: str) -> Optional[str]:
        return self._fetch(step_description, lambda: self._driver.current_window_handle,
                           "Exception occurred while getting window handle", "window handle")

    def get_window_handles(self, step_description: str) -> List[str]:
        handles = self._fetch(step_description, lambda: list(self._driver.window_handles),
                              "Exception occurred while getting window handles", "window handles")
        return handles if handles is not None else []

    def get_screenshot(self) -> Optional[bytes]:
        """Capture the current viewport as PNG bytes, None on failure."""
        try:
            screenshot = self._driver.get_screenshot_as_png()
            self.logger.log_step_success("Capture screenshot", "Successfully captured screenshot")
            return screenshot
        except Exception as e:
            self.logger.log_step_failure("Capture screenshot",
                                         "Exception occurred while capturing screenshot", e)
        return None

    # element actions

    def click(self, step_description: str, target: Target) -> bool:
        """Click the element once it is visible."""
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            element.click,
            "Successfully clicked web element",
            "Exception occurred while clicking web element"
        )

    def click_using_actions(self, step_description: str, target: Target) -> bool:
        """Move to the visible element and click it with ActionChains."""
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: ActionChains(self._driver).move_to_element(element).click().perform(),
            "Successfully clicked web element using actions",
            "Exception occurred while clicking web element using actions"
        )

    def click_using_js_executor(self, step_description: str, target: Target) -> bool:
        """Click the element through JavaScript once it is present on the DOM."""
        element = self.wait_for_presence_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: self._driver.execute_script("arguments[0].click();", element),
            "Successfully clicked web element using javascript",
            "Exception occurred while clicking web element using javascript"
        )

    def send_keys(self, step_description: str, target: Target, value: str) -> bool:
        """Type ``value`` into the visible element."""
        if not self._is_not_blank(value):
            return self._fail(step_description, f"Blank value to send: '{value}'")
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: element.send_keys(value),
            f"Successfully sent keys: {value} to web element",
            "Exception occurred while sending keys to web element"
        )

    def clear_and_send_keys(self, step_description: str, target: Target, value: str) -> bool:
        """Clear the visible element and type ``value`` into it."""
        if not self._is_not_blank(value):
            return self._fail(step_description, f"Blank value to send: '{value}'")
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False

        def clear_and_type():
            element.clear()
            element.send_keys(value)

        return self._call(
            step_description,
            clear_and_type,
            f"Successfully cleared and sent keys: {value} to web element",
            "Exception occurred while clearing and sending keys to web element"
        )

    def select_by_visible_text(self, step_description: str, target: Target, visible_text: str) -> bool:
        """Select all options of a visible <select> whose text matches."""
        if not self._is_not_blank(visible_text):
            return self._fail(step_description, f"Blank visible text: '{visible_text}'")
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: Select(element).select_by_visible_text(visible_text),
            f"Successfully selected option: {visible_text} by visible text",
            "Exception occurred while selecting option by visible text"
        )

    def select_by_value(self, step_description: str, target: Target, value: str) -> bool:
        """Select all options of a visible <select> whose value matches."""
        if not self._is_not_blank(value):
            return self._fail(step_description, f"Blank option value: '{value}'")
        element = self.wait_for_visibility_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: Select(element).select_by_value(value),
            f"Successfully selected option: {value} by value",
            "Exception occurred while selecting option by value"
        )

    def drag_and_drop(self, step_description: str, source: Target, target: Target) -> bool:
        """Drag the visible ``source`` element and drop it on the visible ``target``."""
        source_element = self.wait_for_visibility_of_element(step_description, source)
        if source_element is None:
            return False
        target_element = self.wait_for_visibility_of_element(step_description, target)
        if target_element is None:
            return False
        return self._call(
            step_description,
            lambda: (ActionChains(self._driver)
                     .move_to_element(source_element)
                     .click_and_hold()
                     .move_to_element(target_element)
                     .release()
                     .perform()),
            "Successfully dragged and dropped web element",
            "Exception occurred while dragging and dropping web element"
        )

    def get_attribute(self, step_description: str, target: Target, attribute: str) -> Optional[str]:
        """Value of an attribute or property of the present element, None if unset."""
        if not self._is_not_blank(attribute):
            self._fail(step_description, f"Blank attribute name: '{attribute}'")
            return None
        element = self.wait_for_presence_of_element(step_description, target)
        if element is None:
            return None
        try:
            value = element.get_attribute(attribute)
            self._succeed(step_description, f"Successfully got attribute: {attribute} = {value}")
            return value
        except Exception as e:
            self._fail(step_description, f"Exception occurred while getting attribute: {attribute}", e)
        return None

    def scroll_into_view(self, step_description: str, target: Target, scroll_options: str = "true") -> bool:
        """Scroll the present element into view.

        ``scroll_options`` is passed verbatim to ``Element.scrollIntoView``:
        ``"true"``, ``"false"`` or an options object such as
        ``"{block: 'center'}"``.
        """
        if not self._is_not_blank(scroll_options):
            return self._fail(step_description, f"Blank scroll options: '{scroll_options}'")
        element = self.wait_for_presence_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: self._driver.execute_script(f"arguments[0].scrollIntoView({scroll_options});", element),
            "Successfully scrolled web element into view",
            "Exception occurred while scrolling web element into view"
        )

    # windows

    def switch_to_window(self, step_description: str, window_handle: str) -> bool:
        """Switch focus to the window with the given name or handle."""
        if not self._is_not_blank(window_handle):
            return self._fail(step_description, f"Blank window handle: '{window_handle}'")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.window(window_handle),
            f"Successfully switched to window: {window_handle}",
            "Exception occurred while switching to window"
        )

    def switch_to_new_window(self, step_description: str,
                             window_type: Union[WindowType, str] = WindowType.TAB) -> bool:
        """Open a new tab or window and switch focus to it."""
        try:
            type_hint = WindowType(window_type).value
        except ValueError:
            return self._fail(step_description, f"Invalid window type: {window_type}")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.new_window(type_hint),
            f"Successfully switched to new {type_hint}",
            f"Exception occurred while switching to new {type_hint}"
        )

    # alerts

    def is_alert_present(self, step_description: str, timeout: Optional[float] = None) -> bool:
        """Wait for an alert to be present."""
        try:
            alert = self._wait(timeout).until(EC.alert_is_present())
            self.logger.log_step_success(step_description, "Successfully found alert")
            return bool(alert)
        except Exception as e:
            self.logger.log_step_failure(step_description,
                                         f"Alert not present: {describe_exception(e)}",
                                         failure_kind=classify_exception(e).value)
        return False

    def switch_to_alert(self, step_description: str) -> bool:
        if not self.is_alert_present(step_description):
            return self._fail(step_description, "Alert not present")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.alert,
            "Successfully switched to alert",
            "Exception occurred while switching to alert"
        )

    def send_keys_to_alert(self, step_description: str, value: str) -> bool:
        if not self._is_not_blank(value):
            return self._fail(step_description, f"Blank value to send: '{value}'")
        if not self.is_alert_present(step_description):
            return self._fail(step_description, "Alert not present")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.alert.send_keys(value),
            f"Successfully sent keys: {value} to alert",
            "Exception occurred while sending keys to alert"
        )

    def accept_alert(self, step_description: str) -> bool:
        if not self.is_alert_present(step_description):
            return self._fail(step_description, "Alert not present")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.alert.accept(),
            "Successfully accepted alert",
            "Exception occurred while accepting alert"
        )

    def dismiss_alert(self, step_description: str) -> bool:
        if not self.is_alert_present(step_description):
            return self._fail(step_description, "Alert not present")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.alert.dismiss(),
            "Successfully dismissed alert",
            "Exception occurred while dismissing alert"
        )

    # frames

    def switch_to_iframe_by_index(self, step_description: str, index: int) -> bool:
        """Switch to a frame by its zero-based index."""
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            return self._fail(step_description, f"Invalid iframe index: {index}")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.frame(index),
            f"Successfully switched to iframe with index: {index}",
            "Exception occurred while switching to iframe"
        )

    def switch_to_iframe_by_name_or_id(self, step_description: str, name_or_id: str) -> bool:
        """Switch to a frame by name or id; name matches take precedence."""
        if not self._is_not_blank(name_or_id):
            return self._fail(step_description, f"Blank iframe name or id: '{name_or_id}'")
        return self._call(
            step_description,
            lambda: self._driver.switch_to.frame(name_or_id),
            f"Successfully switched to iframe with name or id: {name_or_id}",
            "Exception occurred while switching to iframe"
        )

    def switch_to_iframe(self, step_description: str, target: Target) -> bool:
        """Switch to the frame element once it is present."""
        element = self.wait_for_presence_of_element(step_description, target)
        if element is None:
            return False
        return self._call(
            step_description,
            lambda: self._driver.switch_to.frame(element),
            "Successfully switched to iframe",
            "Exception occurred while switching to iframe"
        )

    def switch_to_default_content(self, step_description: str) -> bool:
        return self._call(
            step_description,
            self._driver.switch_to.default_content,
            "Successfully switched to default content",
            "Exception occurred while switching to default content"
        )

    # explicit waits

    def is_element_present(self, step_description: str, target: Target,
                           timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element present on the DOM, without reporting failures."""
        return self._wait_for_presence(step_description, target, timeout, False)

    def wait_for_presence_of_element(self, step_description: str, target: Target,
                                     timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element present on the DOM (not necessarily visible)."""
        return self._wait_for_presence(step_description, target, timeout, True)

    def is_element_visible(self, step_description: str, target: Target,
                           timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element displayed with a non-zero size, without reporting failures."""
        return self._wait_for_visibility(step_description, target, timeout, False)

    def wait_for_visibility_of_element(self, step_description: str, target: Target,
                                       timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element displayed with a non-zero size."""
        return self._wait_for_visibility(step_description, target, timeout, True)

    def is_element_invisible(self, step_description: str, target: Target,
                             timeout: Optional[float] = None) -> bool:
        """True once the element is hidden, detached or absent, without reporting failures."""
        return self._wait_for_invisibility(step_description, target, timeout, False)

    def wait_for_invisibility_of_element(self, step_description: str, target: Target,
                                         timeout: Optional[float] = None) -> bool:
        """True once the element is hidden, detached or absent."""
        return self._wait_for_invisibility(step_description, target, timeout, True)

    def is_element_clickable(self, step_description: str, target: Target,
                             timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element visible and enabled, without reporting failures."""
        return self._wait_for_clickability(step_description, target, timeout, False)

    def wait_for_element_to_be_clickable(self, step_description: str, target: Target,
                                         timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element visible and enabled."""
        return self._wait_for_clickability(step_description, target, timeout, True)

    def is_element_attribute_equal_to(self, step_description: str, target: Target, attribute: str,
                                      value: str, timeout: Optional[float] = None) -> bool:
        return self._wait_for_attribute(step_description, target, attribute, value,
                                        attribute_to_be, "to be", timeout, False)

    def wait_for_attribute_to_be(self, step_description: str, target: Target, attribute: str,
                                 value: str, timeout: Optional[float] = None) -> bool:
        """True once the element's attribute equals ``value``."""
        return self._wait_for_attribute(step_description, target, attribute, value,
                                        attribute_to_be, "to be", timeout, True)

    def does_element_attribute_contain(self, step_description: str, target: Target, attribute: str,
                                       value: str, timeout: Optional[float] = None) -> bool:
        return self._wait_for_attribute(step_description, target, attribute, value,
                                        attribute_to_contain, "to contain", timeout, False)

    def wait_for_attribute_to_contain(self, step_description: str, target: Target, attribute: str,
                                      value: str, timeout: Optional[float] = None) -> bool:
        """True once the element's attribute contains ``value``."""
        return self._wait_for_attribute(step_description, target, attribute, value,
                                        attribute_to_contain, "to contain", timeout, True)

    def wait_for_custom_condition(self, step_description: str, condition: Callable,
                                  timeout: Optional[float] = None, generate_report: bool = True) -> Any:
        """Wait until ``condition(driver)`` returns a truthy value and return it."""
        if condition is None:
            return self._fail(step_description, "Null custom expected condition",
                              generate_report=generate_report, default=None)
        try:
            return self._wait(timeout).until(condition)
        except Exception as e:
            self._fail(step_description, "Exception occurred while waiting for custom expected condition",
                       e, generate_report=generate_report)
        return None

    # immediate lookups

    def find_element(self, target: Target) -> Optional[WebElement]:
        """First element matching ``target`` on the current page, without waiting."""
        return self._lookup(target, lambda locator: self._driver.find_element(*locator), None)

    def find_elements(self, target: Target) -> List[WebElement]:
        """All elements matching the first locator that matches anything."""
        return self._lookup(target, lambda locator: self._driver.find_elements(*locator), [])

    def find_child_element(self, parent: WebElement, target: Target) -> Optional[WebElement]:
        """First descendant of ``parent`` matching ``target``."""
        if not isinstance(parent, WebElement):
            self.logger.error(f"Invalid parent web element: {parent!r}")
            return None
        return self._lookup(target, lambda locator: parent.find_element(*locator), None)

    def find_child_elements(self, parent: WebElement, target: Target) -> List[WebElement]:
        """Descendants of ``parent`` matching the first locator that matches anything."""
        if not isinstance(parent, WebElement):
            self.logger.error(f"Invalid parent web element: {parent!r}")
            return []
        return self._lookup(target, lambda locator: parent.find_elements(*locator), [])

    # internals

    def _wait(self, timeout: Optional[float]) -> WebDriverWait:
        return WebDriverWait(
            self._driver,
            timeout if timeout is not None else self._default_explicit_wait,
            poll_frequency=self.poll_frequency
        )

    def _wait_for_presence(self, step_description, target, timeout, generate_report):
        return self._wait_until(
            step_description, target, timeout, generate_report,
            for_locator=EC.presence_of_element_located,
            for_element=None,
            failure_message="No element present",
            default=None
        )

    def _wait_for_visibility(self, step_description, target, timeout, generate_report):
        return self._wait_until(
            step_description, target, timeout, generate_report,
            for_locator=EC.visibility_of_element_located,
            for_element=EC.visibility_of,
            failure_message="No visible element found",
            default=None
        )

    def _wait_for_clickability(self, step_description, target, timeout, generate_report):
        return self._wait_until(
            step_description, target, timeout, generate_report,
            for_locator=EC.element_to_be_clickable,
            for_element=EC.element_to_be_clickable,
            failure_message="No clickable element found",
            default=None
        )

    def _wait_for_invisibility(self, step_description, target, timeout, generate_report):
        result = self._wait_until(
            step_description, target, timeout, generate_report,
            for_locator=EC.invisibility_of_element_located,
            for_element=EC.invisibility_of_element,
            failure_message="No invisible element found",
            default=False
        )
        return bool(result)

    def _wait_for_attribute(self, step_description, target, attribute, value,
                            condition, relation, timeout, generate_report):
        if not self._is_not_blank(attribute) or value is None:
            return self._fail(
                step_description,
                f"One or more of the required fields is blank. attribute: '{attribute}', value: '{value}'",
                generate_report=generate_report
            )
        result = self._wait_until(
            step_description, target, timeout, generate_report,
            for_locator=lambda locator: condition(locator, attribute, value),
            for_element=lambda element: condition(element, attribute, value),
            failure_message=f"No element found with attribute {attribute} {relation} '{value}'",
            default=False
        )
        return bool(result)

    def _wait_until(
        self,
        step_description: str,
        target: Target,
        timeout: Optional[float],
        generate_report: bool,
        for_locator: ConditionFactory,
        for_element: Optional[ConditionFactory],
        failure_message: str,
        default: Any
    ) -> Any:
        """Wait for a condition on ``target`` and return its result or ``default``."""
        if not self._is_valid_target(target):
            return self._fail(step_description, f"Invalid locator target: {target!r}",
                              generate_report=generate_report, default=default)

        wait = self._wait(timeout)

        if isinstance(target, WebElement):
            if for_element is None:
                return target
            outcome = self._attempt_wait(lambda: wait.until(for_element(target)))
        elif isinstance(target, str):
            result = self.resolver.resolve(
                target,
                lambda descriptor: wait.until(for_locator(descriptor.to_by())),
                step_description,
                default
            )
            outcome = (result, None)
        else:
            outcome = self._attempt_wait(lambda: wait.until(for_locator(target)))

        result, error = outcome
        if result:
            return result

        message = f"{failure_message} by locator: {self._describe(target)}"
        if isinstance(target, str):
            # The resolver has already logged the miss
            if generate_report:
                self._report_failure(step_description, message, None)
            return default
        self._fail(step_description, message, error, generate_report=generate_report)
        return default

    @staticmethod
    def _attempt_wait(wait_call: Callable[[], Any]) -> Tuple[Any, Optional[BaseException]]:
        try:
            return wait_call(), None
        except Exception as e:
            return None, e

    def _lookup(self, target: Target, find: Callable[[Locator], Any], default: Any) -> Any:
        """Immediate lookup for a locator string or a native locator."""
        if isinstance(target, str) and self._is_not_blank(target):
            return self.resolver.resolve(target, lambda descriptor: find(descriptor.to_by()),
                                         default=default)

        if self._is_native_locator(target):
            outcome = self._attempt_native(target, find)
            if outcome.error is None and outcome.result:
                return outcome.result
            detail = describe_exception(outcome.error) if outcome.error is not None else "no match"
            self.logger.error(f"No web element found with locator: {self._describe(target)} ({detail})",
                              extra={'failure_kind': outcome.failure_kind})
            return default

        self.logger.error(f"Invalid locator target: {target!r}")
        return default

    @staticmethod
    def _attempt_native(locator: Locator, find: Callable[[Locator], Any]):
        return attempt(None, lambda _: find(locator))

    def _call(self, step_description: str, action: Callable[[], Any], success_message: str,
              failure_message: str, capture_screenshot: bool = True) -> bool:
        """Run a browser action and convert its outcome into True/False."""
        try:
            action()
        except Exception as e:
            return self._fail(step_description, failure_message, e,
                              capture_screenshot=capture_screenshot)
        return self._succeed(step_description, success_message)

    def _fetch(self, step_description: str, getter: Callable[[], Any], failure_message: str,
               label: Optional[str] = None) -> Any:
        """Read a value from the driver, None on failure."""
        try:
            value = getter()
        except Exception as e:
            self._fail(step_description, failure_message, e)
            return None
        if label:
            self.logger.log_step_success(step_description, f"Successfully got {label}: {value}")
        return value

    def _succeed(self, step_description: str, message: str) -> bool:
        self.logger.log_step_success(step_description, message)
        self._report_success(step_description, message)
        return True

    def _fail(self, step_description: str, message: str, error: Optional[BaseException] = None,
              generate_report: bool = True, capture_screenshot: bool = True, default: Any = False) -> Any:
        if error is not None:
            kind = classify_exception(error).value
            self.logger.log_step_failure(step_description, f"{message}: {describe_exception(error)}",
                                         error, failure_kind=kind)
        else:
            self.logger.log_step_failure(step_description, message)
        if generate_report:
            self._report_failure(step_description, message, error, capture_screenshot)
        return default

    def _reporter(self) -> Optional[ReportingProvider]:
        if not self.reporting.enabled:
            return None
        return self.reporter or reporting.get_provider(required=False)

    def _report_success(self, step_description: str, details: str):
        provider = self._reporter()
        if provider is None:
            return
        screenshot = self.get_screenshot() if self.reporting.success_screenshots else None
        try:
            provider.report_step_success(step_description, details, screenshot)
        except Exception as e:
            self.logger.log_step_failure(step_description, "Exception occurred while reporting step success", e)

    def _report_failure(self, step_description: str, details: str,
                        error: Optional[BaseException], capture_screenshot: bool = True):
        provider = self._reporter()
        if provider is None:
            return
        screenshot = None
        if capture_screenshot and self.reporting.failure_screenshots:
            screenshot = self.get_screenshot()
        try:
            provider.report_step_failure(step_description, details, error, screenshot)
        except Exception as e:
            self.logger.log_step_failure(step_description, "Exception occurred while reporting step failure", e)

    @staticmethod
    def _is_not_blank(value: Any) -> bool:
        return isinstance(value, str) and bool(value.strip())

    @staticmethod
    def _is_native_locator(target: Any) -> bool:
        return (isinstance(target, tuple) and len(target) == 2
                and all(isinstance(part, str) for part in target))

    def _is_valid_target(self, target: Any) -> bool:
        return (isinstance(target, WebElement) or self._is_not_blank(target)
                or self._is_native_locator(target))

    @staticmethod
    def _describe(target: Target) -> str:
        if isinstance(target, tuple):
            return f"{target[0]}={target[1]}"
        if isinstance(target, WebElement):
            return "<web element>"
        return str(target)
