"""
Tests for order card assembly in live and preview mode.
"""

import pytest

from order_card_engine.card import (
    build_card,
    render_live_card,
    render_preview_card,
    sample_order,
    simulate_preview_status,
)
from order_card_engine.labels import DEFAULT_COLOR
from order_card_engine.records import OrderRecord, OrderStatus
from order_card_engine.sentinels import INVALID_REGEX, NOT_SET


class TestBuildCard:
    def test_upstream_card(self, fields, order, labels, payload):
        card = build_card(fields, order, labels, payload)
        assert card.title == "Rose Bouquet"
        assert card.variant_title == "Large"
        assert card.field_view("timeslot").display == "09:00-11:00"
        assert card.field_view("orderDate").display == "2024-12-25T00:00:00.000Z"
        assert card.field_view("productTitle") is None

    def test_label_colors_and_badge(self, fields, order, labels, payload):
        card = build_card(fields, order, labels, payload)
        difficulty = card.field_view("difficultyLabel")
        assert difficulty.display == "Hard"
        assert difficulty.color == "#ef4444"
        assert card.badge.name == "Hard"
        assert card.field_view("productTypeLabel").color == "#a855f7"

    def test_unknown_label_gets_default_color(self, fields, labels, payload):
        order = OrderRecord.from_dict({
            "id": "o", "product": {"labelNames": ["Tricky"], "labelCategories": ["difficulty"]},
        })
        view = build_card(fields, order, labels, payload).field_view("difficultyLabel")
        assert view.display == "Tricky"
        assert view.color == DEFAULT_COLOR

    def test_badge_falls_back_to_product_type(self, fields, labels, payload):
        order = OrderRecord.from_dict({
            "id": "o", "product": {"labelNames": ["Bouquet"], "labelCategories": ["productType"]},
        })
        card = build_card(fields, order, labels, payload)
        assert card.field_view("difficultyLabel").display == NOT_SET
        assert card.badge.name == "Bouquet"
        assert card.badge.color == "#a855f7"

    def test_no_labels_no_badge(self, fields, labels, payload):
        assert build_card(fields, OrderRecord.from_dict({"id": "o"}), labels, payload).badge is None

    def test_control_fields_follow_order_state(self, fields, labels, payload):
        order = OrderRecord.from_dict({"id": "o", "status": "assigned", "assignedTo": "U42"})
        card = build_card(fields, order, labels, payload)
        assert card.field_view("status").display == "Assigned"
        assert card.field_view("assignedTo").display == "Grace"
        assert card.assignee_name == "Grace"

    def test_hidden_fields(self, fields, order, labels, payload):
        assert build_card(fields, order, labels, payload).field_view("customisations") is None
        card = build_card(fields, order, labels, payload, include_hidden=True)
        assert card.field_view("customisations").display == "Ribbon in gold please"

    def test_one_bad_field_does_not_break_the_card(self, fields, order, labels, payload, field_factory):
        card = build_card(fields + [field_factory("broken", paths=("tags",), pattern="[")], order, labels, payload)
        assert card.field_view("broken").display == INVALID_REGEX
        assert card.field_view("timeslot").display == "09:00-11:00"

    def test_missing_value_shows_not_set(self, order, labels, field_factory):
        card = build_card([field_factory("missing", paths=("nope",))], order, labels, {"name": "#1"})
        assert card.field_view("missing").display == NOT_SET

    def test_rows(self, fields, order, labels, payload):
        row = build_card(fields, order, labels, payload).field_view("orderDate").as_row()
        assert row["source"] == "tags"
        assert row["icon"] == "calendar"
        assert row["hint"] == "date"


class TestLiveCard:
    def test_uses_stored_payload(self, fields, labels, payload, product):
        order = OrderRecord.from_dict({
            "id": "o", "orderId": "#LOCAL", "shopifyOrderData": dict(payload, localProduct=product),
        })
        card = render_live_card(fields, order, labels)
        assert card.field_view("orderId").display == "#1001"
        assert card.field_view("difficultyLabel").display == "Hard"

    def test_local_only_order(self, fields, labels):
        order = OrderRecord.from_dict({"id": "o", "orderId": "#LOCAL", "timeslot": "10:00-12:00"})
        card = render_live_card(fields, order, labels)
        assert card.field_view("orderId").display == "#LOCAL"
        assert card.field_view("timeslot").display == "10:00-12:00"


class TestPreviewCard:
    def test_sample_order(self, fields, labels):
        card = render_preview_card(fields, labels)
        assert card.title == "Rose Bouquet"
        assert card.field_view("timeslot").display == "09:00-11:00"
        assert card.field_view("orderDate").display == "2024-01-15T00:00:00.000Z"
        assert card.field_view("difficultyLabel").display == "Hard"
        assert card.field_view("customisations") is not None

    def test_fetched_payload_replaces_sample(self, fields, labels, payload, product):
        card = render_preview_card(fields, labels, upstream_payload=payload, product=product)
        assert card.title == "Rose Bouquet"
        assert card.field_view("orderId").display == "#1001"
        assert card.field_view("productTypeLabel").display == "Bouquet"
        assert card.field_view("customisations").display == "Ribbon in gold please"

    def test_fetched_payload_without_product(self, fields, labels):
        card = render_preview_card(fields, labels, upstream_payload={"name": "#9"})
        assert card.title == ""
        assert card.field_view("timeslot").display == NOT_SET
        assert card.field_view("difficultyLabel").display == NOT_SET

    @pytest.mark.parametrize("status,assignee", [
        ("unassigned", None),
        ("assigned", "U42"),
        ("completed", "U42"),
    ])
    def test_simulated_status(self, labels, status, assignee):
        order = simulate_preview_status(sample_order(labels), status, labels, acting_user_id="U42")
        assert order.status is OrderStatus(status)
        assert order.assigned_to == assignee

    def test_simulated_status_picks_first_florist(self, labels):
        order = simulate_preview_status(sample_order(labels), "assigned", labels)
        assert order.assigned_to == "U42"
