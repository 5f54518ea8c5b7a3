"""Unit tests for locator string parsing and first-match resolution."""

import logging
from unittest.mock import Mock, patch

import pytest
from selenium.common.exceptions import NoSuchElementException, TimeoutException

from selenium_template.core.models import FailureKind, LocatorDescriptor, LocatorStrategy
from selenium_template.services import locator_resolver
from selenium_template.services.locator_resolver import (
    MAX_CACHE_SIZE,
    LocatorResolver,
    attempt,
    parse_locator_string,
    resolve_first
)

RESOLVER_LOGGER = "selenium_template.services.locator_resolver"


def descriptor(strategy: LocatorStrategy, value: str) -> LocatorDescriptor:
    return LocatorDescriptor(strategy=strategy, value=value)


class TestParseLocatorString:
    """Test parse_locator_string."""

    def test_parses_single_pair(self):
        assert parse_locator_string("id~username") == [descriptor(LocatorStrategy.ID, "username")]

    def test_preserves_order_of_all_keys(self):
        locator_string = (
            "xpath~//input;className~field;name~q;id~q;css~input.q;"
            "tagName~input;linkText~Home;partialLinkText~Ho"
        )

        descriptors = parse_locator_string(locator_string)

        assert [d.strategy for d in descriptors] == [
            LocatorStrategy.XPATH,
            LocatorStrategy.CLASS_NAME,
            LocatorStrategy.NAME,
            LocatorStrategy.ID,
            LocatorStrategy.CSS,
            LocatorStrategy.TAG_NAME,
            LocatorStrategy.LINK_TEXT,
            LocatorStrategy.PARTIAL_LINK_TEXT
        ]
        assert [d.value for d in descriptors] == [
            "//input", "field", "q", "q", "input.q", "input", "Home", "Ho"
        ]

    def test_malformed_pair_is_dropped(self):
        descriptors = parse_locator_string("id~a;bogus;css~b")

        assert descriptors == [
            descriptor(LocatorStrategy.ID, "a"),
            descriptor(LocatorStrategy.CSS, "b")
        ]

    def test_unknown_key_is_dropped(self):
        assert parse_locator_string("foo~bar;id~a") == [descriptor(LocatorStrategy.ID, "a")]

    def test_keys_are_case_sensitive(self):
        assert parse_locator_string("ID~a;classname~b") == []

    @pytest.mark.parametrize("locator_string", ["", "   ", " ; ;", None])
    def test_empty_input_yields_nothing(self, locator_string):
        assert parse_locator_string(locator_string) == []

    def test_blank_value_is_dropped(self):
        assert parse_locator_string("id~ ;name~q") == [descriptor(LocatorStrategy.NAME, "q")]

    def test_value_keeps_tilde_after_first_separator(self):
        descriptors = parse_locator_string("xpath~//a[text()='a~b']")

        assert descriptors == [descriptor(LocatorStrategy.XPATH, "//a[text()='a~b']")]

    def test_duplicates_are_kept(self):
        descriptors = parse_locator_string("css~div;css~div")

        assert len(descriptors) == 2

    def test_parsing_is_idempotent(self):
        locator_string = "xpath~//input[@id='q'];css~input[name='q']"

        assert parse_locator_string(locator_string) == parse_locator_string(locator_string)

    def test_successful_parse_logs_one_debug_record(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)

        parse_locator_string("id~a;css~b")

        records = [r for r in caplog.records if r.name == RESOLVER_LOGGER]
        assert len(records) == 1
        assert records[0].levelno == logging.DEBUG
        assert "Parsed 2 locator(s)" in records[0].getMessage()

    def test_malformed_pair_logs_error(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)

        parse_locator_string("bogus;id~a")

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "bogus" in errors[0].getMessage()

    def test_empty_result_logs_error_with_input(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)

        parse_locator_string("foo~bar")

        messages = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert any("No locators found in locator string: foo~bar" in m for m in messages)


class TestAttempt:
    """Test the single descriptor attempt."""

    def test_captures_result(self):
        target = descriptor(LocatorStrategy.ID, "a")

        outcome = attempt(target, lambda d: "element")

        assert outcome.succeeded is True
        assert outcome.result == "element"
        assert outcome.error is None

    def test_captures_and_classifies_exception(self):
        target = descriptor(LocatorStrategy.ID, "a")
        error = TimeoutException("timed out")

        def query(_):
            raise error

        outcome = attempt(target, query)

        assert outcome.succeeded is False
        assert outcome.error is error
        assert outcome.failure_kind == FailureKind.TIMEOUT

    def test_empty_result_is_not_success(self):
        outcome = attempt(descriptor(LocatorStrategy.ID, "a"), lambda d: [])

        assert outcome.succeeded is False
        assert outcome.error is None


class TestResolveFirst:
    """Test first-match-wins resolution."""

    def setup_method(self):
        self.first = descriptor(LocatorStrategy.XPATH, "//input[@id='q']")
        self.second = descriptor(LocatorStrategy.CSS, "input[name='q']")
        self.third = descriptor(LocatorStrategy.NAME, "q")

    def test_first_match_short_circuits(self):
        query = Mock(return_value="element")

        result = resolve_first([self.first, self.second], query)

        assert result == "element"
        query.assert_called_once_with(self.first)

    def test_falls_back_after_exception(self):
        query = Mock(side_effect=[NoSuchElementException("missing"), "element"])

        result = resolve_first([self.first, self.second, self.third], query)

        assert result == "element"
        assert query.call_count == 2

    def test_falls_back_after_empty_result(self):
        query = Mock(side_effect=[None, False, "element"])

        assert resolve_first([self.first, self.second, self.third], query) == "element"

    def test_lists_are_not_merged(self):
        query = Mock(side_effect=[[], ["e1"], ["e2", "e3"]])

        result = resolve_first([self.first, self.second, self.third], query, default=[])

        assert result == ["e1"]
        assert query.call_count == 2

    def test_empty_descriptor_list_never_queries(self):
        query = Mock()

        assert resolve_first([], query, default=[]) == []
        query.assert_not_called()

    def test_total_miss_returns_default_and_logs_once(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)
        query = Mock(side_effect=NoSuchElementException("missing"))

        result = resolve_first([self.first, self.second], query,
                               locator_string="xpath~a;css~b", default=False)

        assert result is False
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].getMessage() == "No match found for locator string: xpath~a;css~b"

    def test_per_descriptor_failures_are_debug_records(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)
        query = Mock(side_effect=[NoSuchElementException("missing"), "element"])

        resolve_first([self.first, self.second], query)

        debug = [r for r in caplog.records if r.levelno == logging.DEBUG]
        assert len(debug) == 1
        assert "NoSuchElementException" in debug[0].getMessage()
        assert str(self.first) in debug[0].getMessage()

    def test_step_description_prefixes_messages(self, caplog):
        caplog.set_level(logging.DEBUG, logger=RESOLVER_LOGGER)

        resolve_first([self.first], Mock(return_value=None),
                      locator_string="xpath~a", step_description="Find search box")

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert errors[0].getMessage().startswith("Find search box: ")


class TestLocatorResolver:
    """Test the caching LocatorResolver."""

    def test_resolve_parses_and_resolves(self):
        resolver = LocatorResolver()
        query = Mock(side_effect=[None, "element"])

        result = resolver.resolve("id~a;css~b", query)

        assert result == "element"
        assert [call.args[0].strategy for call in query.call_args_list] == [
            LocatorStrategy.ID, LocatorStrategy.CSS
        ]

    def test_parse_results_are_cached(self):
        resolver = LocatorResolver()

        with patch.object(locator_resolver, "parse_locator_string",
                          wraps=locator_resolver.parse_locator_string) as parse:
            resolver.parse("id~a")
            resolver.parse("id~a")

        parse.assert_called_once_with("id~a")

    def test_cached_list_is_a_copy(self):
        resolver = LocatorResolver()

        first = resolver.parse("id~a")
        first.append(descriptor(LocatorStrategy.CSS, "b"))

        assert resolver.parse("id~a") == [descriptor(LocatorStrategy.ID, "a")]

    def test_invalid_string_is_not_cached(self):
        resolver = LocatorResolver()

        resolver.parse("foo~bar")

        assert resolver._cache == {}

    def test_cache_is_bounded(self):
        resolver = LocatorResolver(max_cache_size=3)

        for index in range(10):
            resolver.parse(f"id~element-{index}")

        assert len(resolver._cache) == 3
        assert list(resolver._cache) == ["id~element-7", "id~element-8", "id~element-9"]

    def test_default_cache_size(self):
        resolver = LocatorResolver()

        for index in range(MAX_CACHE_SIZE + 50):
            resolver.parse(f"css~#item-{index}")

        assert len(resolver._cache) == MAX_CACHE_SIZE

    def test_recently_used_entry_survives_eviction(self):
        resolver = LocatorResolver(max_cache_size=2)
        resolver.parse("id~a")
        resolver.parse("id~b")

        resolver.parse("id~a")
        resolver.parse("id~c")

        assert list(resolver._cache) == ["id~a", "id~c"]

    def test_zero_cache_size_disables_caching(self):
        resolver = LocatorResolver(max_cache_size=0)

        assert resolver.parse("id~a") == [descriptor(LocatorStrategy.ID, "a")]
        assert resolver._cache == {}

    def test_clear_cache(self):
        resolver = LocatorResolver()
        resolver.parse("id~a")

        resolver.clear_cache()

        assert resolver._cache == {}

    def test_resolve_invalid_string_returns_default(self):
        query = Mock()

        assert LocatorResolver().resolve("", query, default=[]) == []
        query.assert_not_called()
