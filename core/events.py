"""
Domain events for the register.

Immutable event objects emitted by the cart reducer and the checkout
service. They are the side effects of a cart transition: the reducer stays
pure and returns events, and the session publishes them on the EventBus,
where handlers (audit trail, logging) react.

Event Categories:
- VoidEvent: items or whole orders voided (audited)
- HoldEvent: held order lifecycle (hold, retrieve, delete)
- OrderCompleted: checkout succeeded

Events carry full snapshots so handlers never read the cart after the fact.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class PosEvent:
    """Base class for all register domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# VOID EVENTS
# =============================================================================


@dataclass(frozen=True)
class VoidEvent(PosEvent):
    """Events that must leave an audit record."""
    actor: Any = None  # Actor | None


@dataclass(frozen=True)
class ItemVoided(VoidEvent):
    """A single line was voided from the active cart."""
    item: Any = None  # LineItem, pre-void snapshot

    @classmethod
    def create(cls, item: Any, actor: Any = None) -> "ItemVoided":
        return cls(item=item, actor=actor)


@dataclass(frozen=True)
class OrderVoided(VoidEvent):
    """The whole active cart was voided."""
    cart: Any = None  # Cart, pre-void snapshot with totals

    @classmethod
    def create(cls, cart: Any, actor: Any = None) -> "OrderVoided":
        return cls(cart=cart, actor=actor)


# =============================================================================
# HOLD EVENTS
# =============================================================================


@dataclass(frozen=True)
class HoldEvent(PosEvent):
    """Events related to the held order lifecycle."""
    pass


@dataclass(frozen=True)
class OrderHeld(HoldEvent):
    """The active cart was set aside as a held order."""
    held_order: Any = None  # HeldOrder

    @classmethod
    def create(cls, held_order: Any) -> "OrderHeld":
        return cls(held_order=held_order)


@dataclass(frozen=True)
class HeldOrderRetrieved(HoldEvent):
    """A held order was restored into the active slot."""
    held_order: Any = None
    discarded_cart: Any = None  # Cart that was overwritten, if it had items

    @classmethod
    def create(cls, held_order: Any, discarded_cart: Any = None) -> "HeldOrderRetrieved":
        return cls(held_order=held_order, discarded_cart=discarded_cart)


@dataclass(frozen=True)
class HeldOrderDeleted(HoldEvent):
    """A held order was deleted without being restored."""
    hold_id: str = ""

    @classmethod
    def create(cls, hold_id: str) -> "HeldOrderDeleted":
        return cls(hold_id=hold_id)


# =============================================================================
# CHECKOUT EVENTS
# =============================================================================


@dataclass(frozen=True)
class OrderCompleted(PosEvent):
    """The order API accepted a checkout."""
    order_id: Any = None
    submission: Any = None  # OrderSubmission

    @classmethod
    def create(cls, order_id: Any, submission: Any) -> "OrderCompleted":
        return cls(order_id=order_id, submission=submission)
