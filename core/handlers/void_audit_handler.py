"""
Handlers for ItemVoided and OrderVoided events.

Each void writes an audit entry with the pre-void snapshot. The event bus
swallows handler errors, so a failing audit backend never blocks a void.
"""

import logging
from typing import Callable

from core.audit import AuditAction, AuditLogger
from core.event_bus import EventBus
from core.events import ItemVoided, OrderVoided

logger = logging.getLogger(__name__)


def handle_item_voided(audit: AuditLogger) -> Callable:
    """
    Factory that returns an ItemVoided handler.

    Args:
        audit: AuditLogger instance

    Returns:
        Handler callable that records the voided line
    """

    def handler(event: ItemVoided):
        audit.log(
            action=AuditAction.VOID_ITEM,
            details={"item": event.item.model_dump(mode="json")},
            actor=event.actor,
        )

    return handler


def handle_order_voided(audit: AuditLogger) -> Callable:
    """
    Factory that returns an OrderVoided handler.

    Args:
        audit: AuditLogger instance

    Returns:
        Handler callable that records every line and the totals
    """

    def handler(event: OrderVoided):
        cart = event.cart
        audit.log(
            action=AuditAction.VOID_ORDER,
            details={
                "items": [item.model_dump(mode="json") for item in cart.items],
                "totals": cart.totals_snapshot(),
                "customer_id": cart.customer_id,
            },
            actor=event.actor,
        )

    return handler


def register_void_audit_handlers(event_bus: EventBus, audit: AuditLogger) -> None:
    """Subscribe the void audit handlers."""
    event_bus.subscribe("ItemVoided", handle_item_voided(audit))
    event_bus.subscribe("OrderVoided", handle_order_voided(audit))
