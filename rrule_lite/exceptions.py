"""Exception hierarchy for rrule_lite.

The recurrence core degrades silently on bad rule text (see
``rule_to_pattern``); these exceptions are raised only by the strict parser
and at the configuration / command-line boundary.
"""


class RecurrenceLiteError(Exception):
    """Base exception for all rrule_lite errors."""


class RuleParseError(RecurrenceLiteError):
    """A rule string could not be interpreted.

    Raised when:
    - The rule is empty
    - FREQ is missing
    - FREQ is not one of DAILY, WEEKLY, MONTHLY, YEARLY
    """


class EventSourceError(RecurrenceLiteError):
    """Base events could not be loaded.

    Raised when:
    - The events file does not exist or cannot be read
    - The file is neither valid YAML nor JSON
    - A record fails model validation
    """


class ConfigError(RecurrenceLiteError):
    """Configuration file is present but unusable.

    Raised when the file parses but its top level is not a mapping.
    """
