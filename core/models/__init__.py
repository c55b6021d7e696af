"""Core domain models."""

from core.models.base import Money, WireModel
from core.models.line_item import LineItem, compute_line_total
from core.models.discount import (
    Discount, DiscountType, DiscountCategory, AppliedDiscount, categorize_discount,
)
from core.models.product import Product, TaxCategory, StoreSettings
from core.models.cart import Cart, CartStatus, HeldOrder
from core.models.order import (
    TenderResult, OrderHeader, OrderItemPayload, OrderSubmission, ORDER_STATUS_COMPLETED,
)

__all__ = [
    # Base
    "Money", "WireModel",
    # LineItem
    "LineItem", "compute_line_total",
    # Discount
    "Discount", "DiscountType", "DiscountCategory", "AppliedDiscount", "categorize_discount",
    # Reference data
    "Product", "TaxCategory", "StoreSettings",
    # Cart
    "Cart", "CartStatus", "HeldOrder",
    # Order
    "TenderResult", "OrderHeader", "OrderItemPayload", "OrderSubmission",
    "ORDER_STATUS_COMPLETED",
]
