"""Cart line item model.

The unit price is a snapshot taken when the product is added; repricing a
cart never re-fetches the catalog.
"""

from decimal import Decimal

from pydantic import ConfigDict, Field

from core.models.base import Money, WireModel
from core.money import round2


def compute_line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """unit_price * quantity, rounded to cents."""
    return round2(unit_price * quantity)


class LineItem(WireModel):
    """One product's presence in the cart."""

    product_id: int
    name: str
    unit_price: Money = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    line_total: Money = Field(..., ge=0)
    is_taxable: bool = True

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        product_id: int,
        name: str,
        unit_price: Decimal,
        quantity: int = 1,
        is_taxable: bool = True,
    ) -> "LineItem":
        """Build a line item with its derived total."""
        return cls(
            product_id=product_id,
            name=name,
            unit_price=unit_price,
            quantity=quantity,
            line_total=compute_line_total(unit_price, quantity),
            is_taxable=is_taxable,
        )

    def with_quantity(self, quantity: int) -> "LineItem":
        """Copy with a new quantity and recomputed line total."""
        return self.model_copy(update={
            "quantity": quantity,
            "line_total": compute_line_total(self.unit_price, quantity),
        })
