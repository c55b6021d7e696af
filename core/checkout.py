"""
Checkout: tender validation and order submission.

Every precondition is checked before anything leaves the register. Once the
order API accepts the order, OrderCompleted is published and the cart is
cleared; if the API rejects it, the cart is left exactly as it was.
"""

import logging
from decimal import ROUND_CEILING, Decimal
from typing import Any

from auth.types import Actor
from clients.pos_api_client import PosApiClient, PosApiError
from core.cards import CardDetails, validate_card
from core.cart import CartSession
from core.config import RegisterConfig
from core.events import OrderCompleted
from core.exceptions import EmptyCartError, InsufficientPaymentError, PaymentMethodRequiredError
from core.models import (
    Cart,
    OrderHeader,
    OrderItemPayload,
    OrderSubmission,
    TenderResult,
)
from core.money import ZERO, round2, to_safe_number
from core.reference import ReferenceDataService
from utils.user_context import require_current_actor

logger = logging.getLogger(__name__)

# Quick-add buttons of the payment dialog
QUICK_TENDER_AMOUNTS = (
    Decimal("1"),
    Decimal("5"),
    Decimal("10"),
    Decimal("20"),
    Decimal("50"),
    Decimal("100"),
)


def compute_tender(total: Any, payment_method: str, amount_tendered: Any, cash: bool | None = None) -> TenderResult:
    """
    Work out what is recorded for a payment.

    Cash gives change (never negative). Other methods are charged the exact
    total: the tendered amount is recorded as the total and change is 0.

    Args:
        total: Cart total
        payment_method: Method name
        amount_tendered: Amount handed over (cash only)
        cash: Whether the method is cash; defaults to payment_method == "cash"
    """
    total = round2(total)
    if cash is None:
        cash = payment_method.lower() == "cash"

    if cash:
        tendered = round2(amount_tendered)
        return TenderResult(
            payment_method=payment_method,
            amount_tendered=tendered,
            change=round2(max(ZERO, tendered - total)),
        )

    return TenderResult(payment_method=payment_method, amount_tendered=total, change=ZERO)


def suggest_cash_tender(total: Any) -> Decimal:
    """Default cash amount: the total rounded up to a whole unit."""
    return round2(to_safe_number(total).to_integral_value(rounding=ROUND_CEILING))


def add_quick_amount(current: Any, amount: Any) -> Decimal:
    return round2(to_safe_number(current) + to_safe_number(amount))


def build_order_submission(
    cart: Cart,
    tender: TenderResult,
    store_id: int,
    user_id: int,
) -> OrderSubmission:
    """Package a cart and its tender as the order-creation payload."""
    header = OrderHeader(
        store_id=store_id,
        user_id=user_id,
        customer_id=cart.customer_id,
        subtotal=cart.subtotal,
        tax=cart.tax,
        discount=cart.discount,
        total=cart.total,
        payment_method=tender.payment_method,
        amount_tendered=tender.amount_tendered,
        change=tender.change,
    )
    return OrderSubmission(
        order=header,
        items=[OrderItemPayload.from_line_item(item) for item in cart.items],
    )


class CheckoutService:
    """Finalizes the active cart of a CartSession."""

    def __init__(
        self,
        session: CartSession,
        api: PosApiClient,
        reference: ReferenceDataService,
        config: RegisterConfig | None = None,
    ):
        self.session = session
        self.api = api
        self.reference = reference
        self.config = config or session.config

    def validate(
        self,
        payment_method: str | None,
        amount_tendered: Any,
        card: CardDetails | None = None,
    ) -> tuple[Actor, TenderResult]:
        """
        Check every precondition of a checkout without side effects.

        Raises:
            NotAuthenticatedError: No cashier is signed in
            PaymentMethodRequiredError: No payment method chosen
            EmptyCartError: Cart has no items
            InsufficientPaymentError: Cash tendered is below the total
            CardValidationError: Card details missing or invalid
        """
        actor = require_current_actor()

        if not payment_method or not payment_method.strip():
            raise PaymentMethodRequiredError("Please select a payment method")
        payment_method = payment_method.strip()

        cart = self.session.cart
        if cart.is_empty:
            raise EmptyCartError("Cannot check out an empty cart")

        is_cash = self.config.is_cash(payment_method)
        if is_cash:
            tendered = round2(to_safe_number(amount_tendered))
            if tendered < cart.total:
                raise InsufficientPaymentError(tendered, cart.total)
        elif self.config.is_card(payment_method):
            check = validate_card(card)
            logger.info("Card payment (%s ending %s)", check.brand or "unknown brand", check.last4)

        tender = compute_tender(cart.total, payment_method, amount_tendered, cash=is_cash)
        return actor, tender

    def checkout(
        self,
        payment_method: str | None,
        amount_tendered: Any = None,
        card: CardDetails | None = None,
    ) -> Any:
        """
        Submit the active cart as a completed order.

        Args:
            payment_method: e.g. "cash", "card"
            amount_tendered: Cash handed over (ignored for other methods)
            card: Card details for card-like methods

        Returns:
            Id of the created order

        Raises:
            CheckoutValidationError: A precondition failed (see validate)
            NotAuthenticatedError: No cashier is signed in
            StoreNotConfiguredError: No store in the back office
            PosApiError: The order API failed; the cart is unchanged
        """
        # Tender is checked against the total at the current back-office rate
        self.session.refresh_tax_rate(self.reference.tax_rate_percent())
        actor, tender = self.validate(payment_method, amount_tendered, card)
        cart = self.session.cart

        store_id = self.reference.active_store_id()
        submission = build_order_submission(cart, tender, store_id=store_id, user_id=actor.id)

        order = self.api.create_order(submission.to_wire())
        order_id = order.get("id") if isinstance(order, dict) else None
        if order_id is None:
            raise PosApiError("Order API response did not include an order id")

        self.session.event_bus.publish(OrderCompleted.create(order_id, submission))
        self.session.complete_checkout(order_id)

        logger.info(
            "Order %s completed: total %s via %s, change %s",
            order_id,
            cart.total,
            tender.payment_method,
            tender.change,
        )
        return order_id
