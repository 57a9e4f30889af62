from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

DIFFICULTY = 'difficulty'
PRODUCT_TYPE = 'productType'


class OrderStatus(str, Enum):
    UNASSIGNED = 'unassigned'
    ASSIGNED = 'assigned'
    COMPLETED = 'completed'

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        if isinstance(value, cls):
            return value
        if value in (None, '', 'pending'):
            return cls.UNASSIGNED
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown order status: {value!r}") from None


@dataclass(frozen=True)
class ProductLabel:
    name: str
    category: Optional[str] = None
    color: Optional[str] = None


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        # Keep empty slots: positions line up across the parallel arrays.
        return [v.strip() for v in value.split(",")]
    if isinstance(value, (list, tuple)):
        return ["" if v is None else str(v) for v in value]
    return [str(value)]


@dataclass(frozen=True)
class ProductBag:
    """Local product data attached to an order: its labels plus any other product fields."""

    labels: Tuple[ProductLabel, ...] = ()
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ProductBag"]:
        if not data:
            return None
        if not isinstance(data, dict):
            raise TypeError("product data must be an object")

        if isinstance(data.get('labels'), list):
            labels = tuple(
                ProductLabel(name=str(l.get('name', '')), category=l.get('category'), color=l.get('color'))
                for l in data['labels']
                if isinstance(l, dict)
            )
        else:
            labels = cls._pair_parallel_arrays(data)

        attributes = {
            k: v for k, v in data.items()
            if k not in ('labels', 'labelNames', 'labelCategories', 'labelColors')
        }
        return cls(labels=labels, attributes=attributes)

    @staticmethod
    def _pair_parallel_arrays(data: Dict[str, Any]) -> Tuple[ProductLabel, ...]:
        names = _as_list(data.get('labelNames'))
        categories = _as_list(data.get('labelCategories'))
        colors = _as_list(data.get('labelColors'))
        if len(names) != len(categories):
            logger.warning(
                "labelNames (%d) and labelCategories (%d) differ in length; unmatched names get no category",
                len(names), len(categories),
            )
        return tuple(
            ProductLabel(
                name=name,
                category=categories[i] if i < len(categories) else None,
                color=colors[i] if i < len(colors) and colors[i] else None,
            )
            for i, name in enumerate(names)
        )

    @property
    def label_names(self) -> List[str]:
        return [l.name for l in self.labels]

    def first_label(self, category: Optional[str] = None) -> Optional[ProductLabel]:
        for label in self.labels:
            if category is None or label.category == category:
                return label
        return None

    def get(self, name: str) -> Any:
        if name == 'labelNames':
            return self.label_names
        if name == 'labelCategories':
            return [l.category for l in self.labels]
        if name == 'labelColors':
            return [l.color for l in self.labels]
        return self.attributes.get(name)


_RECORD_KEYS = ('id', 'status', 'assignedTo', 'notes')


@dataclass(frozen=True)
class OrderRecord:
    id: str
    status: OrderStatus = OrderStatus.UNASSIGNED
    assigned_to: Optional[str] = None
    notes: str = ''
    local: Dict[str, Any] = field(default_factory=dict)
    upstream: Optional[Dict[str, Any]] = None
    product: Optional[ProductBag] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderRecord":
        if not isinstance(data, dict):
            raise TypeError("order record must be an object")
        if data.get('id') in (None, ''):
            raise ValueError("order record needs an id")

        raw_upstream = data.get('upstream', data.get('shopifyOrderData'))
        product_data = data.get('product', data.get('localProduct'))
        upstream = None
        if isinstance(raw_upstream, dict):
            # Stored payloads may carry the local product bag inline.
            upstream = {k: v for k, v in raw_upstream.items() if k != 'localProduct'}
            if product_data is None:
                product_data = raw_upstream.get('localProduct')

        skip = set(_RECORD_KEYS) | {'upstream', 'shopifyOrderData', 'product', 'localProduct'}
        return cls(
            id=str(data['id']),
            status=OrderStatus.parse(data.get('status')),
            assigned_to=data.get('assignedTo') or None,
            notes=data.get('notes') or '',
            local={k: v for k, v in data.items() if k not in skip},
            upstream=upstream,
            product=ProductBag.from_dict(product_data),
        )

    def get(self, key: str) -> Any:
        """Local field lookup by the camelCase field id."""
        if key == 'id':
            return self.id
        if key == 'status':
            return self.status.value
        if key == 'assignedTo':
            return self.assigned_to
        if key == 'notes':
            return self.notes
        return self.local.get(key)

    def with_changes(self, changes: Dict[str, Any]) -> "OrderRecord":
        """Return a copy with a partial update applied (camelCase keys)."""
        kwargs: Dict[str, Any] = {}
        local = dict(self.local)
        for key, value in changes.items():
            if key == 'status':
                kwargs['status'] = OrderStatus.parse(value)
            elif key == 'assignedTo':
                kwargs['assigned_to'] = value or None
            elif key == 'notes':
                kwargs['notes'] = value or ''
            elif key == 'id':
                continue
            else:
                local[key] = value
        return replace(self, local=local, **kwargs)
