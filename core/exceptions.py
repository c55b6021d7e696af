"""Typed exceptions for register operations.

Validation errors are raised before any side effect; the cart is unchanged
whenever one of these propagates.
"""

from decimal import Decimal


class PosError(Exception):
    """Base class for register errors."""


# =============================================================================
# CART STATE MACHINE
# =============================================================================


class InvalidCartTransitionError(PosError):
    """The command is not allowed in the cart's current state."""

    def __init__(self, command: str, status: str):
        self.command = command
        self.status = status
        super().__init__(f"Cannot {command} a cart that is {status}")


class HeldOrderNotFoundError(PosError):
    """No held order with the given id."""

    def __init__(self, hold_id: str):
        self.hold_id = hold_id
        super().__init__(f"Held order {hold_id} not found")


# =============================================================================
# CHECKOUT VALIDATION
# =============================================================================


class CheckoutValidationError(PosError):
    """A proposed payment was rejected before submission."""


class PaymentMethodRequiredError(CheckoutValidationError):
    """No payment method was chosen."""


class EmptyCartError(CheckoutValidationError):
    """Checkout was attempted with nothing in the cart."""


class InsufficientPaymentError(CheckoutValidationError):
    """Cash tendered is less than the cart total."""

    def __init__(self, amount_tendered: Decimal, total: Decimal):
        self.amount_tendered = amount_tendered
        self.total = total
        super().__init__(
            f"Amount tendered ({amount_tendered}) must be greater than or "
            f"equal to the total amount ({total})"
        )


class CardValidationError(CheckoutValidationError):
    """Card details failed client-side validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class StoreNotConfiguredError(PosError):
    """No usable store is configured in the back office."""
