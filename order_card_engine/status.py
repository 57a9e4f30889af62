from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from .records import OrderRecord, OrderStatus

logger = logging.getLogger(__name__)

# Persistence collaborator: (order_id, partial order) -> awaitable that resolves or raises.
OrderUpdater = Callable[[str, Dict[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class OrderUpdate:
    order_id: str
    changes: Dict[str, Any] = field(default_factory=dict)


def plan_status_change(
    order: OrderRecord,
    new_status: Any,
    acting_user_id: Optional[str] = None,
    assignee: Optional[str] = None,
) -> OrderUpdate:
    """Update for a status-button press.

    Moving to assigned or completed with a known acting user claims the order
    for that user, unless the same action names an assignee explicitly.
    Moving to unassigned clears the assignee.
    """
    status = OrderStatus.parse(new_status)
    changes: Dict[str, Any] = {'status': status.value}
    if status is OrderStatus.UNASSIGNED:
        changes['assignedTo'] = None
    elif assignee:
        changes['assignedTo'] = assignee
    elif acting_user_id:
        changes['assignedTo'] = acting_user_id
    return OrderUpdate(order.id, changes)


def plan_reassignment(order: OrderRecord, florist_id: Optional[str]) -> OrderUpdate:
    """Update for the assignee selector; the status follows the choice."""
    florist_id = florist_id or None
    status = OrderStatus.ASSIGNED if florist_id else OrderStatus.UNASSIGNED
    return OrderUpdate(order.id, {'assignedTo': florist_id, 'status': status.value})


class CardPhase(str, Enum):
    IDLE = 'idle'
    UPDATING = 'updating'


class OrderCardSession:
    """Per-card update state: one in-flight update at a time, drafts reverted on failure.

    Status and assignee are never applied locally; they change when a fresh
    order snapshot arrives through `refresh()`.
    """

    def __init__(self, order: OrderRecord, updater: OrderUpdater, acting_user_id: Optional[str] = None):
        self.order = order
        self.updater = updater
        self.acting_user_id = acting_user_id
        self.phase = CardPhase.IDLE
        self.notes_draft = order.notes
        self.last_error: Optional[BaseException] = None

    @property
    def is_updating(self) -> bool:
        return self.phase is CardPhase.UPDATING

    def refresh(self, order: OrderRecord) -> None:
        """Take a new snapshot of the order. An unedited notes draft follows it."""
        if self.notes_draft == self.order.notes:
            self.notes_draft = order.notes
        self.order = order

    def edit_notes(self, text: str) -> None:
        self.notes_draft = text or ''

    async def change_status(self, new_status: Any) -> bool:
        update = plan_status_change(self.order, new_status, self.acting_user_id)
        return await self._submit(update)

    async def reassign(self, florist_id: Optional[str]) -> bool:
        return await self._submit(plan_reassignment(self.order, florist_id))

    async def save_notes(self) -> bool:
        if self.notes_draft == self.order.notes:
            return False
        last_good = self.order.notes
        return await self._submit(
            OrderUpdate(self.order.id, {'notes': self.notes_draft}),
            on_failure=lambda: setattr(self, 'notes_draft', last_good),
        )

    async def _submit(self, update: OrderUpdate, on_failure: Optional[Callable[[], None]] = None) -> bool:
        if self.is_updating:
            logger.debug("order %s: update blocked, previous update still in flight", update.order_id)
            return False

        self.phase = CardPhase.UPDATING
        try:
            await self.updater(update.order_id, dict(update.changes))
        except Exception as exc:
            logger.error("order %s: update %s failed", update.order_id, sorted(update.changes), exc_info=True)
            self.last_error = exc
            if on_failure is not None:
                on_failure()
            return False
        finally:
            self.phase = CardPhase.IDLE

        self.last_error = None
        return True
