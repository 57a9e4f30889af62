from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class FieldConfigError(ValueError):
    """A field definition could not be loaded."""


class FieldKind(str, Enum):
    """The closed set of field types. Governs post-transform coercion and rendering."""

    TEXT = 'text'
    DATE = 'date'
    SELECT = 'select'
    TEXTAREA = 'textarea'

    @property
    def default_icon(self) -> str:
        return _KIND_ICONS[self]

    @property
    def render_hint(self) -> str:
        return _KIND_RENDER_HINTS[self]


_KIND_ICONS = {
    FieldKind.TEXT: 'hash',
    FieldKind.DATE: 'calendar',
    FieldKind.SELECT: 'list',
    FieldKind.TEXTAREA: 'message-square',
}

_KIND_RENDER_HINTS = {
    FieldKind.TEXT: 'inline',
    FieldKind.DATE: 'date',
    FieldKind.SELECT: 'choice',
    FieldKind.TEXTAREA: 'multiline',
}

# Older configs used these type names.
_LEGACY_KINDS = {
    'tags': FieldKind.TEXT,
    'status': FieldKind.SELECT,
}

FIELD_ICONS = {
    'productTitle': 'package',
    'productVariantTitle': 'package',
    'timeslot': 'clock',
    'orderId': 'hash',
    'orderDate': 'calendar',
    'orderTags': 'tag',
    'assignedTo': 'user',
    'difficultyLabel': 'alert-triangle',
    'productTypeLabel': 'package',
    'addOns': 'gift',
    'customisations': 'message-square',
    'status': 'circle',
}


class TransformationKind(str, Enum):
    NONE = 'none'
    EXTRACT = 'extract'


@dataclass(frozen=True)
class Transformation:
    kind: TransformationKind = TransformationKind.NONE
    pattern: Optional[str] = None

    @property
    def is_extract(self) -> bool:
        return self.kind is TransformationKind.EXTRACT


NO_TRANSFORMATION = Transformation()


@dataclass(frozen=True)
class FieldDefinition:
    id: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    category: str = 'order'
    visible: bool = True
    source_paths: Tuple[str, ...] = ()
    transformation: Transformation = NO_TRANSFORMATION
    icon_ref: Optional[str] = None
    description: str = ''
    editable: bool = False

    def icon(self) -> str:
        return self.icon_ref or FIELD_ICONS.get(self.id) or self.kind.default_icon

    def render_hint(self) -> str:
        return self.kind.render_hint

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldDefinition":
        if not isinstance(data, dict):
            raise FieldConfigError("field definition must be an object")
        field_id = data.get('id')
        if not field_id or not isinstance(field_id, str):
            raise FieldConfigError("field definition needs a string id")

        return cls(
            id=field_id,
            label=str(data.get('label') or field_id),
            kind=_parse_kind(field_id, data.get('type', 'text')),
            category=str(data.get('category') or 'order'),
            visible=bool(data.get('visible', data.get('isVisible', True))),
            source_paths=_parse_source_paths(field_id, data),
            transformation=_parse_transformation(field_id, data),
            icon_ref=data.get('icon') or None,
            description=str(data.get('description') or ''),
            editable=bool(data.get('editable', data.get('isEditable', False))),
        )

    def to_dict(self) -> Dict[str, Any]:
        transformation: Dict[str, Any] = {'kind': self.transformation.kind.value}
        if self.transformation.pattern is not None:
            transformation['pattern'] = self.transformation.pattern
        out: Dict[str, Any] = {
            'id': self.id,
            'label': self.label,
            'category': self.category,
            'visible': self.visible,
            'type': self.kind.value,
            'sourcePaths': list(self.source_paths),
            'transformation': transformation,
            'icon': self.icon(),
        }
        if self.description:
            out['description'] = self.description
        if self.editable:
            out['editable'] = True
        return out


def _parse_kind(field_id: str, raw: Any) -> FieldKind:
    name = str(raw or 'text').strip().lower()
    if name in _LEGACY_KINDS:
        logger.info("field %s: legacy type %r read as %r", field_id, name, _LEGACY_KINDS[name].value)
        return _LEGACY_KINDS[name]
    try:
        return FieldKind(name)
    except ValueError:
        raise FieldConfigError(f"field {field_id}: unknown type {raw!r}") from None


def _parse_source_paths(field_id: str, data: Dict[str, Any]) -> Tuple[str, ...]:
    raw = data.get('sourcePaths', data.get('shopifyFields'))
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not all(isinstance(p, str) for p in raw):
        raise FieldConfigError(f"field {field_id}: sourcePaths must be a list of strings")
    return tuple(p.strip() for p in raw if p.strip())


def _parse_transformation(field_id: str, data: Dict[str, Any]) -> Transformation:
    raw = data.get('transformation')
    pattern = data.get('transformationRule')
    if isinstance(raw, dict):
        pattern = raw.get('pattern', pattern)
        raw = raw.get('kind')

    kind_name = str(raw or 'none').strip().lower()
    if kind_name == 'extract':
        if not pattern or not isinstance(pattern, str):
            raise FieldConfigError(f"field {field_id}: extract transformation needs a pattern")
        return Transformation(TransformationKind.EXTRACT, pattern)
    if kind_name not in ('none', 'transform'):
        raise FieldConfigError(f"field {field_id}: unknown transformation {raw!r}")
    return NO_TRANSFORMATION


def load_fields(data: Any) -> List[FieldDefinition]:
    """Load field definitions from a list or from {"fields": [...]}."""
    if isinstance(data, dict):
        data = data.get('fields', data.get('config'))
    if not isinstance(data, list):
        raise FieldConfigError("field configuration must be a list of field definitions")

    fields = [FieldDefinition.from_dict(item) for item in data]
    seen = set()
    for f in fields:
        if f.id in seen:
            raise FieldConfigError(f"duplicate field id {f.id!r}")
        seen.add(f.id)
    return fields


def fields_to_json(fields: Iterable[FieldDefinition]) -> str:
    return json.dumps({'fields': [f.to_dict() for f in fields]}, indent=2)


def get_field(fields: Iterable[FieldDefinition], field_id: str) -> Optional[FieldDefinition]:
    for f in fields:
        if f.id == field_id:
            return f
    return None


def _extract(pattern: str) -> Transformation:
    return Transformation(TransformationKind.EXTRACT, pattern)


DEFAULT_FIELDS: Tuple[FieldDefinition, ...] = (
    FieldDefinition('productTitle', 'Product Title', category='product',
                    source_paths=('line_items.title',), description='Name of the product'),
    FieldDefinition('productVariantTitle', 'Product Variant Title', category='product',
                    source_paths=('line_items.variant_title',), description='Specific variant of the product'),
    FieldDefinition('timeslot', 'Timeslot', category='product', source_paths=('tags',),
                    transformation=_extract(r'\d{2}:\d{2}-\d{2}:\d{2}'), editable=True,
                    description='Scheduled order preparation timeslot'),
    FieldDefinition('orderId', 'Order ID', category='product', source_paths=('name',),
                    description='Unique order identifier'),
    FieldDefinition('orderDate', 'Order Date', kind=FieldKind.DATE, category='product', source_paths=('tags',),
                    transformation=_extract(r'\d{2}/\d{2}/\d{4}'), description='Date when order was placed'),
    FieldDefinition('orderTags', 'Order Tags', category='product', source_paths=('tags',), editable=True,
                    description='Tags associated with the order'),
    FieldDefinition('assignedTo', 'Assigned To', kind=FieldKind.SELECT, category='admin', editable=True,
                    description='Florist assigned to this order'),
    FieldDefinition('difficultyLabel', 'Difficulty Label', category='admin',
                    source_paths=('product:difficultyLabel',), description='Difficulty/Priority level'),
    FieldDefinition('productTypeLabel', 'Product Type Label', category='admin',
                    source_paths=('product:productTypeLabel',),
                    description='Product type assigned to the product from Product Management'),
    FieldDefinition('addOns', 'Add-Ons', kind=FieldKind.TEXTAREA, category='admin', source_paths=('note',),
                    editable=True, description='Special requests or add-ons for the order'),
    FieldDefinition('customisations', 'Customisations', kind=FieldKind.TEXTAREA, category='admin', visible=False,
                    source_paths=('note',), editable=True, description='Additional remarks and customisation notes'),
    FieldDefinition('status', 'Status', kind=FieldKind.SELECT, category='status', editable=True,
                    description='Order status'),
)
