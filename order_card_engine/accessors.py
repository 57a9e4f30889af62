from __future__ import annotations

import logging
from typing import Any, List, Optional

from .paths import split_path

logger = logging.getLogger(__name__)


def _step_into_list(items: list, key: str) -> Any:
    # Numeric segment -> positional index; otherwise look for a {name, value} pair.
    if key.isdigit():
        idx = int(key)
        return items[idx] if idx < len(items) else None
    for item in items:
        if isinstance(item, dict) and item.get('name') == key:
            return item.get('value')
    return None


def _match_dotted_key(container: dict, keys: List[str], i: int) -> Optional[int]:
    """Find a dict key that itself contains dots, e.g. 'gpt-3.5-turbo'.

    Returns the index of the last consumed segment, or None.
    """
    candidate = keys[i]
    for j in range(i + 1, len(keys)):
        candidate = candidate + '.' + keys[j]
        if candidate in container:
            return j
    return None


def get_value_by_path(data: Any, path: str) -> Any:
    """Walk a dot path through nested dicts and lists.

    Returns None as soon as a segment is missing or the current value is not a
    dict or list.
    """
    keys = split_path(path)
    if not keys:
        return None

    val = data
    i = 0
    while i < len(keys):
        key = keys[i]
        if isinstance(val, dict):
            if key in val:
                val = val[key]
            else:
                j = _match_dotted_key(val, keys, i)
                if j is None:
                    logger.debug("path %r: segment %r not found", path, key)
                    return None
                val = val['.'.join(keys[i:j + 1])]
                i = j
        elif isinstance(val, list):
            val = _step_into_list(val, key)
        else:
            logger.debug("path %r: cannot index %s with %r", path, type(val).__name__, key)
            return None

        if val is None:
            return None
        i += 1

    return val
