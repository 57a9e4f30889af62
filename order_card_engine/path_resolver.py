from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .accessors import get_value_by_path
from .paths import LINE_ITEM_VARIANT_TITLE, PathShape, TAGS_PATH, classify_path, product_field
from .records import DIFFICULTY, PRODUCT_TYPE, ProductBag


@dataclass(frozen=True)
class DataBag:
    """Everything a source path may read: the upstream payload and the local product bag."""

    payload: Optional[Dict[str, Any]] = None
    product: Optional[ProductBag] = None


Strategy = Callable[[str, DataBag], Any]

_LABEL_CATEGORY_FIELDS = {
    'difficultyLabel': DIFFICULTY,
    'productTypeLabel': PRODUCT_TYPE,
}


def resolve_product_path(path: str, bag: DataBag) -> Any:
    name = product_field(path)
    product = bag.product
    if name is None or product is None:
        return None
    if name == 'labelNames':
        names = product.label_names
        return names[0] if names and names[0] else None
    if name in _LABEL_CATEGORY_FIELDS:
        label = product.first_label(_LABEL_CATEGORY_FIELDS[name])
        return label.name if label and label.name else None
    return product.get(name)


def resolve_tags_path(path: str, bag: DataBag) -> Any:
    if not isinstance(bag.payload, dict):
        return None
    tags = bag.payload.get(TAGS_PATH)
    if isinstance(tags, list):
        return ", ".join("" if t is None else str(t) for t in tags)
    return tags


def first_line_item(payload: Any) -> Optional[Dict[str, Any]]:
    """First line item of either the GraphQL (edges/node) or the REST payload shape."""
    node = get_value_by_path(payload, 'lineItems.edges.0.node')
    if isinstance(node, dict):
        return node
    item = get_value_by_path(payload, 'line_items.0')
    return item if isinstance(item, dict) else None


def resolve_line_item_path(path: str, bag: DataBag) -> Any:
    item = first_line_item(bag.payload)
    if item is None:
        return None
    if path == LINE_ITEM_VARIANT_TITLE:
        variant = item.get('variant')
        if isinstance(variant, dict) and variant.get('title') is not None:
            return variant.get('title')
        return item.get('variant_title')
    return item.get('title')


def resolve_dot_path(path: str, bag: DataBag) -> Any:
    return get_value_by_path(bag.payload, path)


DEFAULT_STRATEGIES: Dict[PathShape, Strategy] = {
    PathShape.PRODUCT: resolve_product_path,
    PathShape.TAGS: resolve_tags_path,
    PathShape.LINE_ITEM: resolve_line_item_path,
    PathShape.DOT_PATH: resolve_dot_path,
}


class PathResolver:
    """Resolves source-path expressions, picking a strategy from the path's shape.

    The live card and the preview tool share one instance so a configuration
    always reads the same value in both places.
    """

    def __init__(self, strategies: Optional[Dict[PathShape, Strategy]] = None):
        self._strategies = dict(DEFAULT_STRATEGIES)
        if strategies:
            self._strategies.update(strategies)

    def resolve(self, path: str, bag: DataBag) -> Any:
        if not path or not isinstance(path, str):
            return None
        return self._strategies[classify_path(path)](path, bag)

    def resolve_first(self, paths: Iterable[str], bag: DataBag) -> Tuple[Any, Optional[str]]:
        """Try paths left to right; the first non-None value wins."""
        for path in paths:
            value = self.resolve(path, bag)
            if value is not None:
                return value, path
        return None, None


default_resolver = PathResolver()
