from __future__ import annotations

from enum import Enum
from typing import List, Optional

PRODUCT_PREFIX = 'product:'
TAGS_PATH = 'tags'
LINE_ITEM_TITLE = 'line_items.title'
LINE_ITEM_VARIANT_TITLE = 'line_items.variant_title'
LINE_ITEM_PATHS = (LINE_ITEM_TITLE, LINE_ITEM_VARIANT_TITLE)


class PathShape(str, Enum):
    """Which resolution strategy a source path is routed to, in precedence order."""

    PRODUCT = 'product'
    TAGS = 'tags'
    LINE_ITEM = 'line_item'
    DOT_PATH = 'dot_path'


def classify_path(path: str) -> PathShape:
    if path.startswith(PRODUCT_PREFIX):
        return PathShape.PRODUCT
    if path == TAGS_PATH:
        return PathShape.TAGS
    if path in LINE_ITEM_PATHS:
        return PathShape.LINE_ITEM
    return PathShape.DOT_PATH


def product_field(path: str) -> Optional[str]:
    """Return the local product field named by a `product:<field>` path."""
    if not path.startswith(PRODUCT_PREFIX):
        return None
    return path[len(PRODUCT_PREFIX):].strip() or None


def escape_path_segment(segment: str) -> str:
    """Escape a key so it stays one segment in a dot path (e.g. 'gpt-3.5-turbo')."""
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('\\', '\\\\').replace('.', '\\.')


def split_path(path: str) -> List[str]:
    """Split a dot path on unescaped '.'; '\\.' keeps a literal dot inside a segment.

    Empty segments (leading, trailing or doubled dots) are kept so they fail the lookup.
    """
    if path is None or path == "":
        return []
    if not isinstance(path, str):
        path = str(path)

    parts: List[str] = []
    buf: List[str] = []
    chars = iter(path)
    for ch in chars:
        if ch == '\\':
            nxt = next(chars, None)
            buf.append('\\' if nxt is None else nxt)
        elif ch == '.':
            parts.append(''.join(buf))
            buf = []
        else:
            buf.append(ch)
    parts.append(''.join(buf))
    return parts
