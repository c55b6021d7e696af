"""
Cart commands and the reducer.

Every cart mutation is a command applied by reduce():

    transition = reduce(cart, AddItem(product), tax_rate_percent)
    cart = transition.cart
    event_bus.publish_all(transition.events)

reduce() is pure: it returns a new Cart (always repriced) and the domain
events the transition produced. Publishing those events, persisting held
orders, and talking to the network are the caller's job (CartSession).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.discounts import DEFAULT_SENIOR_RATE, resolve_discount_amount
from core.events import ItemVoided, OrderHeld, OrderVoided, PosEvent
from core.exceptions import InvalidCartTransitionError
from core.models import AppliedDiscount, Cart, Discount, HeldOrder, LineItem, Product
from core.money import ZERO, to_safe_number
from core.pricing import recompute

logger = logging.getLogger(__name__)


# =============================================================================
# COMMANDS
# =============================================================================


@dataclass(frozen=True)
class CartCommand:
    """Base class for cart commands."""


@dataclass(frozen=True)
class AddItem(CartCommand):
    product: Product
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem(CartCommand):
    product_id: int


@dataclass(frozen=True)
class UpdateQuantity(CartCommand):
    product_id: int
    quantity: int


@dataclass(frozen=True)
class ClearCart(CartCommand):
    pass


@dataclass(frozen=True)
class ApplyDiscount(CartCommand):
    discount: Discount | None
    senior_rate: Decimal = DEFAULT_SENIOR_RATE


@dataclass(frozen=True)
class SetCustomer(CartCommand):
    customer_id: int | None


@dataclass(frozen=True)
class HoldCart(CartCommand):
    hold_id: str
    name: str
    timestamp: datetime


@dataclass(frozen=True)
class RestoreCart(CartCommand):
    held_order: HeldOrder


@dataclass(frozen=True)
class VoidItem(CartCommand):
    product_id: int
    actor: Any = None


@dataclass(frozen=True)
class VoidOrder(CartCommand):
    actor: Any = None


@dataclass(frozen=True)
class CompleteCheckout(CartCommand):
    order_id: Any


@dataclass(frozen=True)
class Reprice(CartCommand):
    """Recompute totals only (e.g. after the tax rate changed)."""


@dataclass(frozen=True)
class Transition:
    """Result of applying a command: the new cart and its side effects."""

    cart: Cart
    events: list[PosEvent] = field(default_factory=list)


# =============================================================================
# REDUCER
# =============================================================================


def empty_cart() -> Cart:
    return Cart()


def reprice(cart: Cart, tax_rate_percent: Any) -> Cart:
    """Copy of `cart` with subtotal/tax/total recomputed."""
    totals = recompute(cart.items, cart.discount, tax_rate_percent)
    return cart.model_copy(update={
        "subtotal": totals.subtotal,
        "tax": totals.tax,
        "total": totals.total,
    })


def _without(cart: Cart, product_id: int) -> tuple[LineItem, ...]:
    return tuple(item for item in cart.items if item.product_id != product_id)


def _add_item(cart: Cart, command: AddItem) -> Transition:
    product = command.product
    if product is None or product.id is None:
        logger.warning("Attempted to add invalid product to cart")
        return Transition(cart)

    price = to_safe_number(product.price, fallback=Decimal("NaN"))
    if price.is_nan():
        logger.warning("Invalid price for product %s: %r", product.name, product.price)
        price = ZERO
    elif price < 0:
        logger.warning("Negative price for product %s: %r", product.name, product.price)
        price = ZERO

    quantity = command.quantity
    if quantity < 1:
        logger.warning("Ignoring add of product %s with quantity %d", product.id, quantity)
        return Transition(cart)

    existing = cart.find_item(product.id)
    if existing is not None:
        updated = existing.with_quantity(existing.quantity + quantity)
        items = tuple(updated if item.product_id == product.id else item for item in cart.items)
    else:
        item = LineItem.create(
            product_id=product.id,
            name=product.name or f"Product #{product.id}",
            unit_price=price,
            quantity=quantity,
            is_taxable=product.is_taxable,
        )
        items = cart.items + (item,)

    return Transition(cart.model_copy(update={"items": items}))


def _update_quantity(cart: Cart, command: UpdateQuantity) -> Transition:
    if command.quantity <= 0:
        return Transition(cart.model_copy(update={"items": _without(cart, command.product_id)}))

    items = tuple(
        item.with_quantity(command.quantity) if item.product_id == command.product_id else item
        for item in cart.items
    )
    return Transition(cart.model_copy(update={"items": items}))


def _apply_discount(cart: Cart, command: ApplyDiscount) -> Transition:
    if command.discount is None:
        return Transition(cart.model_copy(update={"discount": ZERO, "applied_discount": None}))

    amount = resolve_discount_amount(command.discount, cart.subtotal, command.senior_rate)
    return Transition(cart.model_copy(update={
        "discount": amount,
        "applied_discount": AppliedDiscount.from_discount(command.discount),
    }))


def _hold(cart: Cart, command: HoldCart) -> Transition:
    if cart.is_empty:
        raise InvalidCartTransitionError("hold", cart.status.value)

    snapshot = cart.model_copy(update={"is_on_hold": True, "hold_id": command.hold_id})
    held = HeldOrder(
        id=command.hold_id,
        name=command.name,
        timestamp=command.timestamp,
        cart=snapshot,
    )
    return Transition(empty_cart(), [OrderHeld.create(held)])


def _restore(command: RestoreCart) -> Transition:
    restored = command.held_order.cart.model_copy(update={"is_on_hold": False, "hold_id": None})
    return Transition(restored)


def _void_item(cart: Cart, command: VoidItem) -> Transition:
    item = cart.find_item(command.product_id)
    if item is None:
        logger.warning("Void requested for product %s which is not in the cart", command.product_id)
        return Transition(cart)

    updated = cart.model_copy(update={"items": _without(cart, command.product_id)})
    return Transition(updated, [ItemVoided.create(item=item, actor=command.actor)])


def _void_order(cart: Cart, command: VoidOrder) -> Transition:
    if cart.is_empty:
        raise InvalidCartTransitionError("void", cart.status.value)
    return Transition(empty_cart(), [OrderVoided.create(cart=cart, actor=command.actor)])


def _complete_checkout(cart: Cart, command: CompleteCheckout) -> Transition:
    if cart.is_empty:
        raise InvalidCartTransitionError("check out", cart.status.value)
    return Transition(empty_cart())


def reduce(cart: Cart, command: CartCommand, tax_rate_percent: Any) -> Transition:
    """
    Apply a command to a cart.

    Args:
        cart: Current cart (not modified)
        command: Command to apply
        tax_rate_percent: Rate used to reprice the resulting cart

    Returns:
        Transition with the repriced cart and emitted events

    Raises:
        InvalidCartTransitionError: If the command is not allowed on the cart
    """
    if isinstance(command, AddItem):
        transition = _add_item(cart, command)
    elif isinstance(command, RemoveItem):
        transition = Transition(cart.model_copy(update={"items": _without(cart, command.product_id)}))
    elif isinstance(command, UpdateQuantity):
        transition = _update_quantity(cart, command)
    elif isinstance(command, ClearCart):
        transition = Transition(empty_cart())
    elif isinstance(command, ApplyDiscount):
        # Resolve against the current subtotal, which must be up to date
        transition = _apply_discount(reprice(cart, tax_rate_percent), command)
    elif isinstance(command, SetCustomer):
        transition = Transition(cart.model_copy(update={"customer_id": command.customer_id}))
    elif isinstance(command, HoldCart):
        transition = _hold(cart, command)
    elif isinstance(command, RestoreCart):
        transition = _restore(command)
    elif isinstance(command, VoidItem):
        transition = _void_item(cart, command)
    elif isinstance(command, VoidOrder):
        transition = _void_order(cart, command)
    elif isinstance(command, CompleteCheckout):
        transition = _complete_checkout(cart, command)
    elif isinstance(command, Reprice):
        transition = Transition(cart)
    else:
        raise ValueError(f"Unknown cart command: {type(command).__name__}")

    return Transition(reprice(transition.cart, tax_rate_percent), transition.events)
