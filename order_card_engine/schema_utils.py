from __future__ import annotations

from typing import Any, Dict, List, Set

from .paths import LINE_ITEM_PATHS, PRODUCT_PREFIX, TAGS_PATH, escape_path_segment

# Well-known order paths offered in the mapping editor, grouped for display.
SOURCE_PATH_CATALOG: Dict[str, List[str]] = {
    "Product Labels": [
        PRODUCT_PREFIX + "difficultyLabel",
        PRODUCT_PREFIX + "productTypeLabel",
        PRODUCT_PREFIX + "labelNames",
    ],
    "Core Order Fields": [
        "id", "name", "orderNumber", "createdAt", "note", TAGS_PATH,
        "displayFulfillmentStatus", "displayFinancialStatus",
    ],
    "Product Information": [
        *LINE_ITEM_PATHS,
        "lineItems.edges.0.node.title",
        "lineItems.edges.0.node.variant.title",
        "lineItems.edges.0.node.variant.sku",
        "lineItems.edges.0.node.quantity",
    ],
    "Customer Information": [
        "shippingAddress.name", "shippingAddress.firstName", "shippingAddress.lastName",
        "email", "phone", "shippingAddress.address1", "shippingAddress.address2",
        "shippingAddress.city", "shippingAddress.province", "shippingAddress.country",
    ],
    "Note Attributes": [
        "noteAttributes.delivery_date", "noteAttributes.delivery_time",
        "noteAttributes.card_message", "noteAttributes.timeslot",
    ],
    "Financial Information": [
        "totalPriceSet.shopMoney.amount", "subtotalPriceSet.shopMoney.amount",
        "totalTaxSet.shopMoney.amount", "currencyCode",
    ],
}


def _is_name_value_list(items: list) -> bool:
    return bool(items) and all(isinstance(i, dict) and 'name' in i and 'value' in i for i in items)


def list_source_paths(data: Any, parent_key: str = '', sep: str = '.') -> Set[str]:
    """Every dot path that reaches a value in a payload.

    Lists of objects are addressed through their first element ("lineItems.edges.0.node.title");
    lists of {name, value} pairs through each name ("noteAttributes.delivery_date").
    """
    keys: Set[str] = set()

    if isinstance(data, dict):
        for k, v in data.items():
            current_key = f"{parent_key}{sep}{escape_path_segment(k)}" if parent_key else escape_path_segment(k)
            if isinstance(v, (dict, list)) and v:
                keys.update(list_source_paths(v, current_key, sep))
            else:
                keys.add(current_key)
    elif isinstance(data, list):
        if _is_name_value_list(data):
            for item in data:
                name = escape_path_segment(item['name'])
                keys.add(f"{parent_key}{sep}{name}" if parent_key else name)
        elif data and isinstance(data[0], (dict, list)):
            keys.update(list_source_paths(data[0], f"{parent_key}{sep}0" if parent_key else "0", sep))
        elif parent_key:
            keys.add(parent_key)
    elif parent_key:
        keys.add(parent_key)

    return keys


def source_path_choices(payload: Any = None) -> List[str]:
    """Catalog paths first, then anything else found in the payload."""
    choices: List[str] = []
    for paths in SOURCE_PATH_CATALOG.values():
        for p in paths:
            if p not in choices:
                choices.append(p)
    if payload is not None:
        for p in sorted(list_source_paths(payload)):
            if p not in choices:
                choices.append(p)
    return choices
