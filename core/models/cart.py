"""Cart and held order models.

Derived totals (subtotal, tax, total) are only ever written by the pricing
engine via core.commands.reduce(); nothing else constructs them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import ConfigDict, Field

from core.models.base import Money, WireModel
from core.models.discount import AppliedDiscount
from core.models.line_item import LineItem
from core.money import ZERO


class CartStatus(str, Enum):
    """State of the active cart slot."""

    EMPTY = "empty"
    ACTIVE = "active"


class Cart(WireModel):
    """The aggregate for one in-progress order."""

    items: tuple[LineItem, ...] = ()
    discount: Money = Field(ZERO, ge=0)
    applied_discount: AppliedDiscount | None = None
    subtotal: Money = ZERO
    tax: Money = ZERO
    total: Money = Field(ZERO, ge=0)
    customer_id: int | None = None
    is_on_hold: bool = False
    hold_id: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def status(self) -> CartStatus:
        return CartStatus.ACTIVE if self.items else CartStatus.EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(item.quantity for item in self.items)

    def find_item(self, product_id: int) -> LineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def totals_snapshot(self) -> dict[str, str]:
        """Monetary fields as strings, for audit entries."""
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "discount": str(self.discount),
            "total": str(self.total),
        }


class HeldOrder(WireModel):
    """A named, timestamped, immutable snapshot of a cart set aside for later."""

    id: str
    name: str
    timestamp: datetime
    cart: Cart

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> Decimal:
        return self.cart.total
