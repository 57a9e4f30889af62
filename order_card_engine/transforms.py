from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from .fields import FieldDefinition, FieldKind
from .sentinels import INVALID_DATE, INVALID_REGEX, NO_MATCH

logger = logging.getLogger(__name__)

_DAY_FIRST_DATE = re.compile(r'\d{2}/\d{2}/\d{4}')
# Fills in whatever a partial date string leaves out, so parsing never depends on today's date.
_PARSE_DEFAULT = datetime(1970, 1, 1)

# Named patterns offered when authoring an extract transformation.
REGEX_PRESETS: Dict[str, Dict[str, str]] = {
    'timeslot': {
        'pattern': r'\b(?:0?[0-9]|1[0-2]):[0-5][0-9]-(?:0?[0-9]|1[0-2]):[0-5][0-9]\b',
        'description': 'Timeslot in format hh:mm-hh:mm',
        'example': '09:30-11:30',
    },
    'date': {
        'pattern': r'\b(?:0[1-9]|[12][0-9]|3[01])/(?:0[1-9]|1[0-2])/[0-9]{4}\b',
        'description': 'Date in format dd/mm/yyyy',
        'example': '25/12/2024',
    },
    'time': {
        'pattern': r'\b(?:0?[0-9]|1[0-2]):[0-5][0-9]\s*(?:AM|PM)?\b',
        'description': 'Time in format hh:mm or hh:mm AM/PM',
        'example': '2:30 PM',
    },
    'phone': {
        'pattern': r'\b(?:\+?[0-9]{1,3}[-.\s]?)?(?:[0-9]{3,4}[-.\s]?){2}[0-9]{4}\b',
        'description': 'Phone numbers in various formats',
        'example': '555-123-4567',
    },
    'email': {
        'pattern': r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b',
        'description': 'Email addresses',
        'example': 'customer@example.com',
    },
}


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def to_iso_instant(value: datetime) -> str:
    """Millisecond-precision UTC instant, e.g. 2024-12-25T00:00:00.000Z. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime('%Y-%m-%dT%H:%M:%S.') + f"{value.microsecond // 1000:03d}Z"


def normalize_date(candidate: str) -> str:
    """Turn an extracted date string into an ISO instant, or the invalid-date sentinel."""
    text = candidate.strip()
    try:
        if _DAY_FIRST_DATE.fullmatch(text):
            day, month, year = text.split('/')
            parsed = datetime(int(year), int(month), int(day))
        else:
            parsed = date_parser.parse(text, default=_PARSE_DEFAULT)
    except (ValueError, OverflowError):
        return INVALID_DATE
    return to_iso_instant(parsed)


def apply_transformation(raw_value: Any, field: FieldDefinition) -> Optional[str]:
    """Run the field's extract step over a raw value.

    Returns None when there is nothing to apply (no extract transformation, or
    a non-string input); the caller decides what to show then.
    """
    transformation = field.transformation
    if not transformation.is_extract or not transformation.pattern:
        return None
    if not isinstance(raw_value, str):
        return None

    try:
        regex = compile_pattern(transformation.pattern)
    except re.error as exc:
        logger.error("field %s: invalid regex %r: %s", field.id, transformation.pattern, exc)
        return INVALID_REGEX

    match = regex.search(raw_value)
    if match is None:
        return NO_MATCH
    candidate = match.group(1) if regex.groups and match.group(1) is not None else match.group(0)

    if field.kind is FieldKind.DATE:
        return normalize_date(candidate)
    return candidate


class TransformationPipeline:
    def apply(self, raw_value: Any, field: FieldDefinition) -> Optional[str]:
        return apply_transformation(raw_value, field)


default_pipeline = TransformationPipeline()
