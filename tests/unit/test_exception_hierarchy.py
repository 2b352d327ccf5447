"""Tests for the rrule_lite exception hierarchy."""

import pytest

from rrule_lite.exceptions import ConfigError, EventSourceError, RecurrenceLiteError, RuleParseError

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("exc_type", [RuleParseError, EventSourceError, ConfigError])
def test_subclasses_share_base(exc_type):
    """All package errors can be caught as RecurrenceLiteError."""
    assert issubclass(exc_type, RecurrenceLiteError)

    with pytest.raises(RecurrenceLiteError, match="boom"):
        raise exc_type("boom")


def test_base_is_an_exception():
    assert issubclass(RecurrenceLiteError, Exception)
