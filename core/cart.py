"""
Cart session: the register's single active-cart slot.

CartSession owns exactly one active Cart and applies every mutation through
core.commands.reduce(). Around the pure reducer it handles what the reducer
can't:

- Held order persistence (written BEFORE the active slot changes, so a
  storage failure leaves the cart untouched)
- Manager authorization for discounts
- Publishing the transition's events (audit handlers subscribe)
"""

import logging
from decimal import Decimal
from typing import Any
from uuid import uuid4

from auth.exceptions import ManagerAuthorizationRequiredError
from auth.manager import ManagerAuthorizer
from auth.types import Actor, ManagerCredentials
from core import commands
from core.config import RegisterConfig
from core.discounts import requires_manager_authorization
from core.event_bus import EventBus
from core.events import HeldOrderDeleted, HeldOrderRetrieved
from core.exceptions import HeldOrderNotFoundError, InvalidCartTransitionError
from core.held_orders import HeldOrderStore
from core.models import Cart, Discount, HeldOrder, Product
from core.money import to_safe_number
from utils.timezone import now_utc
from utils.user_context import get_current_actor

logger = logging.getLogger(__name__)


class CartSession:
    """Service for the active cart and its held orders."""

    def __init__(
        self,
        held_orders: HeldOrderStore,
        event_bus: EventBus,
        config: RegisterConfig | None = None,
        tax_rate_percent: Any = None,
        manager_authorizer: ManagerAuthorizer | None = None,
    ):
        self.config = config or RegisterConfig()
        self.held_orders = held_orders
        self.event_bus = event_bus
        self.manager_authorizer = manager_authorizer
        self._tax_rate = (
            self.config.default_tax_rate_percent
            if tax_rate_percent is None
            else to_safe_number(tax_rate_percent, fallback=0)
        )
        self._cart = commands.empty_cart()

    @property
    def cart(self) -> Cart:
        """The active cart (immutable snapshot)."""
        return self._cart

    @property
    def tax_rate_percent(self) -> Decimal:
        return self._tax_rate

    def _dispatch(self, command: commands.CartCommand) -> Cart:
        transition = commands.reduce(self._cart, command, self._tax_rate)
        self._cart = transition.cart
        self.event_bus.publish_all(transition.events)
        return self._cart

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1) -> Cart:
        """Add a product, or increment its quantity if already in the cart."""
        return self._dispatch(commands.AddItem(product=product, quantity=quantity))

    def remove_item(self, product_id: int) -> Cart:
        return self._dispatch(commands.RemoveItem(product_id=product_id))

    def update_quantity(self, product_id: int, quantity: int) -> Cart:
        """Set a line's quantity; zero or below removes the line."""
        return self._dispatch(commands.UpdateQuantity(product_id=product_id, quantity=quantity))

    def clear(self) -> Cart:
        """Reset to an empty cart (discount and customer are not kept)."""
        return self._dispatch(commands.ClearCart())

    def set_customer(self, customer_id: int | None) -> Cart:
        return self._dispatch(commands.SetCustomer(customer_id=customer_id))

    def set_tax_rate(self, tax_rate_percent: Any) -> Cart:
        """Change the tax rate and reprice. Invalid rates become 0%."""
        self._tax_rate = to_safe_number(tax_rate_percent, fallback=0)
        return self._dispatch(commands.Reprice())

    def refresh_tax_rate(self, tax_rate_percent: Any) -> Cart:
        """Like set_tax_rate, but reprices only when the rate changed."""
        rate = to_safe_number(tax_rate_percent, fallback=0)
        if rate == self._tax_rate:
            return self._cart
        logger.info("Tax rate changed from %s%% to %s%%", self._tax_rate, rate)
        return self.set_tax_rate(rate)

    # -------------------------------------------------------------------------
    # Discounts
    # -------------------------------------------------------------------------

    def apply_discount(
        self,
        discount: Discount | None,
        manager_credentials: ManagerCredentials | None = None,
    ) -> Cart:
        """
        Apply a discount (None removes it).

        Args:
            discount: Discount rule to apply
            manager_credentials: Needed when the signed-in cashier isn't privileged

        Returns:
            Updated cart

        Raises:
            ManagerAuthorizationRequiredError: Authorization needed, none supplied
            ManagerAuthorizationDeniedError: Credentials rejected; nothing applied
        """
        actor = get_current_actor()
        if requires_manager_authorization(discount, actor, self.config):
            if manager_credentials is None or self.manager_authorizer is None:
                raise ManagerAuthorizationRequiredError(
                    f"Discount '{discount.name}' requires manager authorization"
                )
            self.manager_authorizer.authorize(manager_credentials)

        return self._dispatch(commands.ApplyDiscount(
            discount=discount,
            senior_rate=self.config.senior_discount_rate,
        ))

    # -------------------------------------------------------------------------
    # Voids
    # -------------------------------------------------------------------------

    def void_item(self, product_id: int) -> Cart:
        """Remove a line and record the void in the audit trail."""
        return self._dispatch(commands.VoidItem(product_id=product_id, actor=get_current_actor()))

    def void_order(self) -> Cart:
        """
        Void the whole cart, recording every line and the totals.

        Raises:
            InvalidCartTransitionError: If the cart is empty
        """
        cart = self._dispatch(commands.VoidOrder(actor=get_current_actor()))
        logger.info("Order voided")
        return cart

    # -------------------------------------------------------------------------
    # Held orders
    # -------------------------------------------------------------------------

    def list_held_orders(self) -> list[HeldOrder]:
        return self.held_orders.list_all()

    def hold_order(self, name: str | None = None) -> str:
        """
        Set the active cart aside as a held order and empty the slot.

        Args:
            name: Label; defaults to "Order #<n>" where n is held count + 1

        Returns:
            Id of the new held order

        Raises:
            InvalidCartTransitionError: If the cart is empty
        """
        if not name or not name.strip():
            name = f"Order #{len(self.held_orders.list_all()) + 1}"

        command = commands.HoldCart(hold_id=uuid4().hex, name=name.strip(), timestamp=now_utc())
        transition = commands.reduce(self._cart, command, self._tax_rate)
        held = transition.events[0].held_order

        # Persist first: if storage fails, the active cart stays as it was
        self.held_orders.add(held)
        self._cart = transition.cart
        self.event_bus.publish_all(transition.events)

        logger.info("Held order %s as %r", held.id, held.name)
        return held.id

    def retrieve_held_order(self, hold_id: str, discard_active: bool = True) -> Cart:
        """
        Restore a held order into the active slot and remove it from the held list.

        Args:
            hold_id: Held order id
            discard_active: Overwrite a non-empty active cart (it is lost);
                if False, a non-empty active cart blocks the retrieval

        Raises:
            HeldOrderNotFoundError: If no held order has that id
            InvalidCartTransitionError: If discard_active is False and the cart has items
        """
        held = self.held_orders.get(hold_id)
        if held is None:
            raise HeldOrderNotFoundError(hold_id)

        discarded = None
        if not self._cart.is_empty:
            if not discard_active:
                raise InvalidCartTransitionError("retrieve a held order into", self._cart.status.value)
            discarded = self._cart
            logger.warning("Discarding active cart (%d lines) to retrieve %s", len(discarded.items), hold_id)

        self.held_orders.remove(hold_id)
        cart = self._dispatch(commands.RestoreCart(held_order=held))
        self.event_bus.publish(HeldOrderRetrieved.create(held, discarded_cart=discarded))
        return cart

    def delete_held_order(self, hold_id: str) -> None:
        """
        Delete a held order without restoring it.

        Raises:
            HeldOrderNotFoundError: If no held order has that id
        """
        if not self.held_orders.remove(hold_id):
            raise HeldOrderNotFoundError(hold_id)
        self.event_bus.publish(HeldOrderDeleted.create(hold_id))

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def complete_checkout(self, order_id: Any) -> Cart:
        """Clear the cart after the order API accepted it."""
        return self._dispatch(commands.CompleteCheckout(order_id=order_id))

    def current_actor(self) -> Actor | None:
        return get_current_actor()
