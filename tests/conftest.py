"""Shared fixtures: a GraphQL-shaped order payload, label tables and field definitions."""

import pytest

from order_card_engine.fields import DEFAULT_FIELDS, FieldDefinition, FieldKind, Transformation, TransformationKind
from order_card_engine.labels import LabelIndex
from order_card_engine.records import OrderRecord


@pytest.fixture
def payload():
    return {
        "id": "gid://shopify/Order/1001",
        "name": "#1001",
        "note": "Ribbon in gold please",
        "tags": ["25/12/2024", "09:00-11:00", "VIP"],
        "lineItems": {
            "edges": [
                {"node": {"title": "Rose Bouquet", "variant": {"title": "Large"}, "quantity": 1}},
            ]
        },
        "shippingAddress": {"name": "Ada Lovelace", "city": "London"},
        "noteAttributes": [
            {"name": "delivery_date", "value": "2024-12-25"},
            {"name": "card_message", "value": "Merry Christmas"},
        ],
    }


@pytest.fixture
def rest_payload():
    return {
        "name": "#2002",
        "tags": "15/01/2024, 10:00-12:00",
        "line_items": [{"title": "Tulip Box", "variant_title": "Small"}],
    }


@pytest.fixture
def label_data():
    return {
        "florists": [
            {"id": "U42", "name": "Grace", "color": "#10b981"},
            {"id": "U7", "name": "Linus", "color": "#3b82f6"},
        ],
        "difficultyLabels": [
            {"id": "d1", "name": "Hard", "color": "#ef4444"},
            {"id": "d2", "name": "Easy", "color": "#22c55e"},
        ],
        "productTypeLabels": [
            {"id": "p1", "name": "Bouquet", "color": "#a855f7"},
        ],
    }


@pytest.fixture
def labels(label_data):
    return LabelIndex.from_dict(label_data)


@pytest.fixture
def fields():
    return list(DEFAULT_FIELDS)


@pytest.fixture
def product():
    return {"labelNames": ["Hard", "Bouquet"], "labelCategories": ["difficulty", "productType"]}


@pytest.fixture
def order(product):
    return OrderRecord.from_dict({
        "id": "o-1",
        "status": "unassigned",
        "notes": "Leave at the door",
        "timeslot": "14:00-16:00",
        "orderId": "#LOCAL-1",
        "product": product,
    })


def make_field(field_id="f", paths=(), pattern=None, kind=FieldKind.TEXT, visible=True):
    transformation = Transformation(TransformationKind.EXTRACT, pattern) if pattern else Transformation()
    return FieldDefinition(field_id, field_id.title(), kind=kind, visible=visible,
                           source_paths=tuple(paths), transformation=transformation)


@pytest.fixture
def field_factory():
    return make_field
