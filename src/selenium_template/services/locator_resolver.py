"""
Locator resolution for the driver layer.

A locator string packs several candidate locators into one value::

    xpath~//input[@id='q'];css~input[name='q'];name~q

Each ``key~value`` pair becomes a :class:`LocatorDescriptor`. Resolution
tries the descriptors in order and returns the first non-empty result, so
later pairs act as fallbacks for earlier ones. Results are never merged
across descriptors, not even for "find all" queries.

Nothing here raises: malformed pairs are dropped, exceptions raised by the
browser are logged and the next descriptor is tried, and a total miss
returns the caller's sentinel.
"""

import logging
from collections import OrderedDict
from typing import Any, Callable, Iterator, List, Optional

from ..core.error_utils import classify_exception, describe_exception
from ..core.logging_config import StepLoggerAdapter
from ..core.models import FailureKind, LocatorAttempt, LocatorDescriptor, LocatorStrategy

logger = StepLoggerAdapter(logging.getLogger(__name__))

PAIR_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "~"

# Parsed locator strings kept per resolver, least recently used evicted first
MAX_CACHE_SIZE = 256

LocatorQuery = Callable[[LocatorDescriptor], Any]


def parse_locator_string(locator_string: Optional[str]) -> List[LocatorDescriptor]:
    """Parse a locator string into an ordered list of descriptors.

    Args:
        locator_string: Pairs of ``key~value`` separated by ``;``

    Returns:
        Descriptors in their original order; empty when nothing valid was found
    """
    if locator_string is None or not locator_string.strip():
        logger.error(f"Blank locator string: '{locator_string}'",
                     extra={'failure_kind': FailureKind.PARSE_ERROR})
        return []

    descriptors = []
    for pair_string in locator_string.split(PAIR_SEPARATOR):
        if not pair_string.strip():
            continue

        descriptor = _parse_locator_pair(pair_string)
        if descriptor is not None:
            descriptors.append(descriptor)

    if not descriptors:
        logger.error(f"No locators found in locator string: {locator_string}",
                     extra={'failure_kind': FailureKind.PARSE_ERROR,
                            'locator': locator_string})
        return []

    logger.debug(f"Parsed {len(descriptors)} locator(s) from locator string: {locator_string}",
                 extra={'operation': 'parse', 'locator': locator_string})
    return descriptors


def _parse_locator_pair(pair_string: str) -> Optional[LocatorDescriptor]:
    """Turn one ``key~value`` segment into a descriptor, None when invalid."""
    parts = pair_string.split(KEY_VALUE_SEPARATOR, 1)
    if len(parts) < 2:
        logger.error(f"Malformed locator pair, expected 'key~value': {pair_string}",
                     extra={'failure_kind': FailureKind.PARSE_ERROR})
        return None

    key, value = parts[0], parts[1]
    if not key.strip() or not value.strip():
        logger.error(f"One or more required fields is blank. locator key: '{key}', locator value: '{value}'",
                     extra={'failure_kind': FailureKind.PARSE_ERROR})
        return None

    strategy = LocatorStrategy.from_key(key)
    if strategy is None:
        logger.error(f"Invalid locator key: {key}",
                     extra={'failure_kind': FailureKind.PARSE_ERROR})
        return None

    return LocatorDescriptor(strategy=strategy, value=value)


def attempt(descriptor: LocatorDescriptor, query: LocatorQuery) -> LocatorAttempt:
    """Run a query for a single descriptor and capture its outcome."""
    try:
        return LocatorAttempt(descriptor=descriptor, result=query(descriptor))
    except Exception as e:
        return LocatorAttempt(
            descriptor=descriptor,
            error=e,
            failure_kind=classify_exception(e)
        )


def iter_attempts(descriptors: List[LocatorDescriptor], query: LocatorQuery,
                  step_description: Optional[str] = None) -> Iterator[LocatorAttempt]:
    """Lazily yield one attempt per descriptor, logging the failed ones."""
    step_logger = logger.for_step(step_description)
    for descriptor in descriptors:
        outcome = attempt(descriptor, query)
        if outcome.error is not None:
            step_logger.debug(
                f"Locator {descriptor} failed with {describe_exception(outcome.error)}",
                extra={'failure_kind': outcome.failure_kind, 'locator': str(descriptor)}
            )
        elif not outcome.result:
            step_logger.debug(f"Locator {descriptor} matched nothing",
                              extra={'locator': str(descriptor)})
        yield outcome


def resolve_first(
    descriptors: List[LocatorDescriptor],
    query: LocatorQuery,
    locator_string: Optional[str] = None,
    step_description: Optional[str] = None,
    default: Any = None
) -> Any:
    """Return the result of the first descriptor whose query succeeds.

    A query succeeds when it returns a truthy value: an element, a non-empty
    list or True. Later descriptors are not evaluated once one succeeds.

    Args:
        descriptors: Candidate locators in priority order
        query: Function running one browser lookup for one descriptor
        locator_string: Original locator string, used in the failure log
        step_description: Optional step description prefixed to log records
        default: Value returned when no descriptor succeeds

    Returns:
        The winning query result, or ``default``
    """
    for outcome in iter_attempts(descriptors, query, step_description):
        if outcome.succeeded:
            return outcome.result

    label = locator_string if locator_string is not None else ";".join(str(d) for d in descriptors)
    logger.for_step(step_description).error(
        f"No match found for locator string: {label}",
        extra={'failure_kind': FailureKind.RESOLUTION_MISS, 'locator': label}
    )
    return default


class LocatorResolver:
    """Parses locator strings once and resolves them against a query."""

    def __init__(self, max_cache_size: int = MAX_CACHE_SIZE):
        self.max_cache_size = max_cache_size
        self._cache: 'OrderedDict[str, List[LocatorDescriptor]]' = OrderedDict()

    def parse(self, locator_string: Optional[str]) -> List[LocatorDescriptor]:
        """Parse a locator string, reusing earlier results for the same string."""
        if locator_string is None:
            return parse_locator_string(locator_string)

        cached = self._cache.get(locator_string)
        if cached is not None:
            self._cache.move_to_end(locator_string)
            return list(cached)

        descriptors = parse_locator_string(locator_string)
        if descriptors and self.max_cache_size > 0:
            self._cache[locator_string] = descriptors
            while len(self._cache) > self.max_cache_size:
                self._cache.popitem(last=False)
        return list(descriptors)

    def resolve(
        self,
        locator_string: Optional[str],
        query: LocatorQuery,
        step_description: Optional[str] = None,
        default: Any = None
    ) -> Any:
        """Parse ``locator_string`` and return the first successful query result."""
        descriptors = self.parse(locator_string)
        return resolve_first(descriptors, query, locator_string, step_description, default)

    def clear_cache(self) -> None:
        self._cache.clear()
