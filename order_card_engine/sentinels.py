from __future__ import annotations

from typing import Any

# Placeholder strings shown in place of a missing or failed value.
NOT_SET = "Not specified"
NOT_APPLICABLE = "N/A"
NO_MATCH = "No match"
INVALID_REGEX = "Invalid Regex"
INVALID_DATE = "Invalid Date"
ERROR_LOADING_FIELD = "Error loading field"

SENTINELS = frozenset({
    NOT_SET,
    NOT_APPLICABLE,
    NO_MATCH,
    INVALID_REGEX,
    INVALID_DATE,
    ERROR_LOADING_FIELD,
})


def is_sentinel(value: Any) -> bool:
    return isinstance(value, str) and value in SENTINELS


def is_blank(value: Any) -> bool:
    """True for values the card renders as "not set"."""
    return value is None or (isinstance(value, str) and value == "")


def display_text(value: Any) -> str:
    if is_blank(value):
        return NOT_SET
    return value if isinstance(value, str) else str(value)
