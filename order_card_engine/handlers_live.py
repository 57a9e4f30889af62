from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import gradio as gr

from .card import render_live_card
from .fields import DEFAULT_FIELDS
from .handlers_preview import card_markdown
from .io_utils import read_json_content
from .labels import LabelIndex
from .records import OrderRecord
from .status import OrderCardSession

logger = logging.getLogger(__name__)


class InMemoryOrderStore:
    """Demo persistence collaborator: holds order snapshots and one card session per order."""

    def __init__(self, orders: Optional[List[OrderRecord]] = None):
        self.orders: Dict[str, OrderRecord] = {o.id: o for o in orders or []}
        self.sessions: Dict[str, OrderCardSession] = {}

    async def update(self, order_id: str, changes: Dict[str, Any]) -> OrderRecord:
        order = self.orders.get(order_id)
        if order is None:
            raise KeyError(f"order {order_id} not found")
        updated = order.with_changes(changes)
        self.orders[order_id] = updated
        return updated

    def session(self, order_id: str, acting_user_id: Optional[str] = None) -> OrderCardSession:
        sess = self.sessions.get(order_id)
        if sess is None:
            sess = OrderCardSession(self.orders[order_id], self.update, acting_user_id)
            self.sessions[order_id] = sess
        sess.acting_user_id = acting_user_id or sess.acting_user_id
        return sess

    def sync(self, order_id: str) -> None:
        """Push the stored snapshot to the card session, as a realtime update would."""
        if order_id in self.sessions and order_id in self.orders:
            self.sessions[order_id].refresh(self.orders[order_id])


def load_orders(file_obj):
    if file_obj is None:
        return None, gr.update(choices=[], value=None), "No file uploaded."
    try:
        data = read_json_content(file_obj)
        if isinstance(data, dict):
            data = data.get("orders", [data])
        orders = [OrderRecord.from_dict(item) for item in data]
    except (ValueError, TypeError, OSError) as e:
        return None, gr.update(choices=[], value=None), f"Error loading orders: {str(e)}"

    store = InMemoryOrderStore(orders)
    logger.info("loaded %d orders", len(store.orders))
    ids = list(store.orders)
    return store, gr.update(choices=ids, value=ids[0] if ids else None), f"Loaded {len(ids)} orders."


def render_order_handler(store, order_id, fields, labels_data):
    if store is None or order_id not in store.orders:
        return "", None, ""
    order = store.orders[order_id]
    card = render_live_card(fields or list(DEFAULT_FIELDS), order, LabelIndex.from_dict(labels_data))
    notes = store.sessions[order_id].notes_draft if order_id in store.sessions else order.notes
    return card_markdown(card), [view.as_row() for view in card.fields], notes


async def _run(store, order_id, fields, labels_data, action: str, acting_user_id=None, **kwargs):
    if store is None or order_id not in store.orders:
        return "", None, "", "Select an order first."

    sess = store.session(order_id, acting_user_id)
    sess.last_error = None
    if action == "status":
        ok = await sess.change_status(kwargs["status"])
    elif action == "assign":
        ok = await sess.reassign(kwargs.get("florist_id"))
    else:
        sess.edit_notes(kwargs.get("notes", ""))
        ok = await sess.save_notes()

    if ok:
        store.sync(order_id)
        message = "Order updated."
    elif sess.last_error is not None:
        message = f"Update failed: {sess.last_error}"
    else:
        message = "Nothing to update."

    markdown, rows, notes = render_order_handler(store, order_id, fields, labels_data)
    return markdown, rows, notes, message


async def status_handler(store, order_id, status, fields, labels_data, acting_user_id=None):
    return await _run(store, order_id, fields, labels_data, "status", acting_user_id, status=status)


async def assign_handler(store, order_id, florist_id, fields, labels_data, acting_user_id=None):
    return await _run(store, order_id, fields, labels_data, "assign", acting_user_id, florist_id=florist_id)


async def notes_handler(store, order_id, notes, fields, labels_data, acting_user_id=None):
    return await _run(store, order_id, fields, labels_data, "notes", acting_user_id, notes=notes)


def florist_choices(labels_data) -> List[Any]:
    labels = LabelIndex.from_dict(labels_data)
    return [("Unassigned", "")] + [(e.name, e.id) for e in labels.entries("florist")]
