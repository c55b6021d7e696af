"""Order submission payload and tender models.

Shape of POST /orders:

    {
      "order": {storeId, userId, customerId, status, subtotal, tax, discount,
                total, paymentMethod, amountTendered, change},
      "items": [{productId, quantity, price, name, totalPrice}, ...]
    }
"""

from pydantic import BaseModel, Field

from core.models.base import Money, WireModel
from core.models.line_item import LineItem

ORDER_STATUS_COMPLETED = "completed"


class TenderResult(BaseModel):
    """Outcome of tendering a payment against a total. Never persisted."""

    payment_method: str
    amount_tendered: Money = Field(..., ge=0)
    change: Money = Field(..., ge=0)


class OrderHeader(WireModel):
    """The `order` part of the submission."""

    store_id: int
    user_id: int
    customer_id: int | None = None
    status: str = ORDER_STATUS_COMPLETED
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    payment_method: str
    amount_tendered: Money
    change: Money


class OrderItemPayload(WireModel):
    """One entry of the `items` part of the submission."""

    product_id: int
    quantity: int
    price: Money
    name: str
    total_price: Money

    @classmethod
    def from_line_item(cls, item: LineItem) -> "OrderItemPayload":
        return cls(
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.unit_price,
            name=item.name or f"Product #{item.product_id}",
            total_price=item.line_total,
        )


class OrderSubmission(WireModel):
    """Full body sent to the order-creation endpoint."""

    order: OrderHeader
    items: list[OrderItemPayload]
