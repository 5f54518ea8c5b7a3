"""Data models for the Selenium driver utility layer."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple
from enum import Enum

from selenium.webdriver.common.by import By


class LocatorStrategy(Enum):
    """Locator keys recognized in a locator string, in their external spelling."""
    XPATH = "xpath"
    CLASS_NAME = "className"
    NAME = "name"
    ID = "id"
    CSS = "css"
    TAG_NAME = "tagName"
    LINK_TEXT = "linkText"
    PARTIAL_LINK_TEXT = "partialLinkText"

    @property
    def by(self) -> str:
        """Selenium ``By`` constant for this strategy."""
        return _BY_MAPPING[self]

    @classmethod
    def from_key(cls, key: str) -> Optional['LocatorStrategy']:
        """Exact-match lookup of a locator key, None when unrecognized."""
        for strategy in cls:
            if strategy.value == key:
                return strategy
        return None

    @classmethod
    def from_by(cls, by: str) -> Optional['LocatorStrategy']:
        """Reverse lookup from a Selenium ``By`` constant."""
        for strategy, by_value in _BY_MAPPING.items():
            if by_value == by:
                return strategy
        return None


_BY_MAPPING = {
    LocatorStrategy.XPATH: By.XPATH,
    LocatorStrategy.CLASS_NAME: By.CLASS_NAME,
    LocatorStrategy.NAME: By.NAME,
    LocatorStrategy.ID: By.ID,
    LocatorStrategy.CSS: By.CSS_SELECTOR,
    LocatorStrategy.TAG_NAME: By.TAG_NAME,
    LocatorStrategy.LINK_TEXT: By.LINK_TEXT,
    LocatorStrategy.PARTIAL_LINK_TEXT: By.PARTIAL_LINK_TEXT,
}


class Browser(Enum):
    """Browsers the driver factory can start."""
    CHROME = "chrome"
    EDGE = "edge"
    FIREFOX = "firefox"


class WindowType(Enum):
    """Type hints accepted by ``switch_to.new_window``."""
    TAB = "tab"
    WINDOW = "window"


class ReportStatus(Enum):
    """Status of a reported step."""
    DEBUG = "DEBUG"
    ERROR = "ERROR"
    FAIL = "FAIL"
    FATAL = "FATAL"
    INFO = "INFO"
    PASS = "PASS"
    SKIP = "SKIP"
    WARNING = "WARNING"

    @property
    def is_failure(self) -> bool:
        return self in (ReportStatus.ERROR, ReportStatus.FAIL,
                        ReportStatus.FATAL, ReportStatus.WARNING)


class FailureKind(Enum):
    """Classification of why a lookup or browser action failed."""
    PARSE_ERROR = "parse_error"
    RESOLUTION_MISS = "resolution_miss"
    TIMEOUT = "timeout"
    ELEMENT_NOT_FOUND = "element_not_found"
    STALE_ELEMENT = "stale_element"
    INVALID_SELECTOR = "invalid_selector"
    ELEMENT_NOT_INTERACTABLE = "element_not_interactable"
    NO_SUCH_WINDOW = "no_such_window"
    NO_SUCH_FRAME = "no_such_frame"
    NO_ALERT = "no_alert"
    SESSION_ERROR = "session_error"
    OTHER = "other"


@dataclass(frozen=True)
class LocatorDescriptor:
    """One parsed locator pair: a strategy and its selector expression."""
    strategy: LocatorStrategy
    value: str

    def to_by(self) -> Tuple[str, str]:
        """Native Selenium locator tuple, e.g. ``(By.ID, "username")``."""
        return (self.strategy.by, self.value)

    @classmethod
    def from_by(cls, locator: Tuple[str, str]) -> Optional['LocatorDescriptor']:
        """Build a descriptor from a native locator tuple, None if unsupported."""
        by, value = locator
        strategy = LocatorStrategy.from_by(by)
        if strategy is None:
            return None
        return cls(strategy=strategy, value=value)

    def __str__(self) -> str:
        return f"{self.strategy.value}~{self.value}"


@dataclass
class LocatorAttempt:
    """Outcome of running one query against one descriptor."""
    descriptor: LocatorDescriptor
    result: Any = None
    error: Optional[BaseException] = None
    failure_kind: Optional[FailureKind] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.result)


@dataclass
class DriverConfiguration:
    """Configuration settings for driver creation, waits and reporting."""
    browser: Browser = Browser.CHROME
    headless: bool = True
    window_size: str = "1920,1080"
    arguments: List[str] = field(default_factory=list)
    use_webdriver_manager: bool = True

    # Timeouts (seconds)
    explicit_wait: float = 10.0
    poll_frequency: float = 0.5
    page_load_timeout: float = 30.0
    implicit_wait: float = 0.0

    # Reporting
    reporting_enabled: bool = True
    success_screenshots: bool = False
    failure_screenshots: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "browser": self.browser.value,
            "headless": self.headless,
            "window_size": self.window_size,
            "arguments": list(self.arguments),
            "use_webdriver_manager": self.use_webdriver_manager,
            "explicit_wait": self.explicit_wait,
            "poll_frequency": self.poll_frequency,
            "page_load_timeout": self.page_load_timeout,
            "implicit_wait": self.implicit_wait,
            "reporting_enabled": self.reporting_enabled,
            "success_screenshots": self.success_screenshots,
            "failure_screenshots": self.failure_screenshots
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DriverConfiguration':
        """Create configuration from dictionary."""
        data = data.copy()
        if "browser" in data and not isinstance(data["browser"], Browser):
            data["browser"] = Browser(str(data["browser"]).lower())
        return cls(**data)
