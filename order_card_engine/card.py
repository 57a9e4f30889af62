from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from .fields import FieldDefinition
from .labels import DEFAULT_COLOR, LabelEntry, LabelIndex, LabelKind
from .records import OrderRecord, OrderStatus, ProductBag
from .resolver import ValueResolver, default_value_resolver
from .sentinels import display_text, is_blank, is_sentinel

# Rendered from the order's workflow state, not from source paths.
CONTROL_FIELD_IDS = ('status', 'assignedTo')
HEADER_FIELD_IDS = ('productTitle', 'productVariantTitle')

_LABEL_FIELDS = {
    'difficultyLabel': LabelKind.DIFFICULTY,
    'productTypeLabel': LabelKind.PRODUCT_TYPE,
}


@dataclass(frozen=True)
class FieldView:
    field: FieldDefinition
    value: Any
    display: str
    color: Optional[str] = None
    source_path: Optional[str] = None
    from_upstream: bool = False

    @property
    def icon(self) -> str:
        return self.field.icon()

    @property
    def render_hint(self) -> str:
        return self.field.render_hint()

    def as_row(self) -> Dict[str, Any]:
        return {
            'field': self.field.id,
            'label': self.field.label,
            'source': self.source_path or '',
            'value': self.display,
            'icon': self.icon,
            'hint': self.render_hint,
        }


@dataclass(frozen=True)
class CardView:
    order_id: str
    status: OrderStatus
    assigned_to: Optional[str]
    assignee_name: str
    title: str = ''
    variant_title: str = ''
    badge: Optional[LabelEntry] = None
    fields: List[FieldView] = field(default_factory=list)

    def field_view(self, field_id: str) -> Optional[FieldView]:
        for view in self.fields:
            if view.field.id == field_id:
                return view
        return None


def _control_view(f: FieldDefinition, order: OrderRecord, labels: LabelIndex) -> FieldView:
    if f.id == 'status':
        return FieldView(f, order.status.value, order.status.value.capitalize())
    florist = labels.resolve_label(LabelKind.FLORIST, order.assigned_to)
    return FieldView(f, order.assigned_to, florist.name, color=florist.color)


def _label_view(view: FieldView, kind: LabelKind, labels: LabelIndex) -> FieldView:
    if is_blank(view.value) or is_sentinel(view.value):
        return view
    entry = labels.find(kind, view.value)
    if entry is None:
        return FieldView(view.field, view.value, view.display, DEFAULT_COLOR, view.source_path, view.from_upstream)
    return FieldView(view.field, view.value, entry.name, entry.color, view.source_path, view.from_upstream)


def build_card(
    fields: Iterable[FieldDefinition],
    order: OrderRecord,
    labels: LabelIndex,
    upstream_payload: Optional[Dict[str, Any]] = None,
    resolver: Optional[ValueResolver] = None,
    include_hidden: bool = False,
) -> CardView:
    """Resolve every field of one order card.

    Header fields are pulled out into the title; the rest keep their
    configured order. Hidden fields are skipped unless `include_hidden`.
    """
    resolver = resolver or default_value_resolver
    views: List[FieldView] = []
    header: Dict[str, str] = {}
    badges: Dict[str, LabelEntry] = {}

    for f in fields:
        if f.id in CONTROL_FIELD_IDS:
            view = _control_view(f, order, labels)
        else:
            res = resolver.explain(f, order, upstream_payload)
            view = FieldView(f, res.value, display_text(res.value), None, res.source_path, res.from_upstream)
            if f.id in _LABEL_FIELDS:
                view = _label_view(view, _LABEL_FIELDS[f.id], labels)
                if view.color is not None:
                    badges[f.id] = LabelEntry(str(view.value), view.display, view.color)

        if f.id in HEADER_FIELD_IDS:
            header[f.id] = '' if is_blank(view.value) else view.display
            continue
        if f.visible or include_hidden:
            views.append(view)

    return CardView(
        order_id=order.id,
        status=order.status,
        assigned_to=order.assigned_to,
        assignee_name=labels.resolve_label(LabelKind.FLORIST, order.assigned_to).name,
        title=header.get('productTitle', ''),
        variant_title=header.get('productVariantTitle', ''),
        # Difficulty first, product type when no difficulty label resolved.
        badge=badges.get('difficultyLabel') or badges.get('productTypeLabel'),
        fields=views,
    )


def render_live_card(fields: Iterable[FieldDefinition], order: OrderRecord, labels: LabelIndex) -> CardView:
    """Live card: the order's own upstream payload, when it has one, is authoritative."""
    return build_card(fields, order, labels, order.upstream)


SAMPLE_ORDER: Dict[str, Any] = {
    'id': 'sample',
    'productTitle': 'Rose Bouquet',
    'productVariantTitle': 'Red Roses - Large',
    'timeslot': '09:00-11:00',
    'orderId': '#ORD-2024-001',
    'orderDate': '15/01/2024',
    'orderTags': 'VIP, Express',
    'addOns': 'Extra foliage, special gift card',
    'customisations': 'Add extra notes and special wrapping',
}


def sample_order(labels: LabelIndex) -> OrderRecord:
    data = dict(SAMPLE_ORDER)
    difficulty = labels.entries(LabelKind.DIFFICULTY)
    if difficulty:
        data['difficultyLabel'] = difficulty[0].id
    return OrderRecord.from_dict(data)


def simulate_preview_status(
    order: OrderRecord,
    status: Any,
    labels: LabelIndex,
    acting_user_id: Optional[str] = None,
) -> OrderRecord:
    """Flip the preview card between states the way a status button would."""
    status = OrderStatus.parse(status)
    if status is OrderStatus.UNASSIGNED:
        return order.with_changes({'status': status.value, 'assignedTo': None})
    assignee = acting_user_id
    if not assignee:
        florists = labels.entries(LabelKind.FLORIST)
        assignee = florists[0].id if florists else None
    return order.with_changes({'status': status.value, 'assignedTo': assignee})


def render_preview_card(
    fields: Iterable[FieldDefinition],
    labels: LabelIndex,
    upstream_payload: Optional[Dict[str, Any]] = None,
    order: Optional[OrderRecord] = None,
    product: Optional[Dict[str, Any]] = None,
) -> CardView:
    """Preview card: a fetched payload if there is one, the sample order otherwise."""
    order = order or sample_order(labels)
    if product is not None:
        order = replace(order, product=ProductBag.from_dict(product))
    return build_card(fields, order, labels, upstream_payload, include_hidden=True)
