"""Register endpoints: the active cart, held orders and checkout."""

from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from api.base import success_response
from auth.types import ManagerCredentials
from core.cards import CardDetails
from core.cart import CartSession
from core.checkout import QUICK_TENDER_AMOUNTS, CheckoutService, suggest_cash_tender
from core.models import Cart, HeldOrder
from core.reference import ReferenceDataService


class AddItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateQuantityRequest(BaseModel):
    quantity: int


class ApplyDiscountRequest(BaseModel):
    """discount_id None removes the current discount."""

    discount_id: int | None = None
    manager: ManagerCredentials | None = None


class SetCustomerRequest(BaseModel):
    customer_id: int | None = None


class HoldOrderRequest(BaseModel):
    name: str | None = None


class CheckoutRequest(BaseModel):
    payment_method: str | None = None
    amount_tendered: Any = None
    card: CardDetails | None = None


def _cart_view(cart: Cart) -> dict:
    data = cart.to_wire()
    data["status"] = cart.status.value
    data["itemCount"] = cart.item_count
    return data


def _held_view(held: HeldOrder) -> dict:
    return held.to_wire()


def create_register_router(
    session: CartSession,
    checkout: CheckoutService,
    reference: ReferenceDataService,
) -> APIRouter:
    router = APIRouter(tags=["register"])

    def _current_cart() -> Cart:
        """Active cart repriced at the back office's current tax rate."""
        return session.refresh_tax_rate(reference.tax_rate_percent())

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    @router.get("/cart")
    async def get_cart():
        return success_response(_cart_view(_current_cart())).model_dump(mode="json")

    @router.post("/cart/items")
    async def add_item(body: AddItemRequest):
        product = reference.get_product(body.product_id)
        _current_cart()
        cart = session.add_item(product, body.quantity)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.patch("/cart/items/{product_id}")
    async def update_quantity(product_id: int, body: UpdateQuantityRequest):
        cart = session.update_quantity(product_id, body.quantity)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.delete("/cart/items/{product_id}")
    async def remove_item(product_id: int):
        cart = session.remove_item(product_id)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.post("/cart/items/{product_id}/void")
    async def void_item(product_id: int):
        cart = session.void_item(product_id)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.post("/cart/discount")
    async def apply_discount(body: ApplyDiscountRequest):
        discount = None
        if body.discount_id is not None:
            discount = reference.get_discount(body.discount_id)
        cart = session.apply_discount(discount, manager_credentials=body.manager)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.post("/cart/customer")
    async def set_customer(body: SetCustomerRequest):
        cart = session.set_customer(body.customer_id)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.post("/cart/clear")
    async def clear_cart():
        cart = session.clear()
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.post("/cart/void")
    async def void_order():
        cart = session.void_order()
        return success_response(_cart_view(cart)).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Held orders
    # -------------------------------------------------------------------------

    @router.get("/held-orders")
    async def list_held_orders():
        held = [_held_view(h) for h in session.list_held_orders()]
        return success_response(held).model_dump(mode="json")

    @router.post("/held-orders")
    async def hold_order(body: HoldOrderRequest):
        hold_id = session.hold_order(body.name)
        return success_response({
            "id": hold_id,
            "cart": _cart_view(session.cart),
        }).model_dump(mode="json")

    @router.post("/held-orders/{hold_id}/retrieve")
    async def retrieve_held_order(hold_id: str, discard_active: bool = Query(True)):
        cart = session.retrieve_held_order(hold_id, discard_active=discard_active)
        return success_response(_cart_view(cart)).model_dump(mode="json")

    @router.delete("/held-orders/{hold_id}")
    async def delete_held_order(hold_id: str):
        session.delete_held_order(hold_id)
        return success_response({"deleted": True}).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @router.get("/checkout/tender")
    async def tender_options():
        """Defaults for the payment dialog."""
        total = _current_cart().total
        return success_response({
            "total": float(total),
            "suggestedCash": float(suggest_cash_tender(total)),
            "quickAmounts": [float(a) for a in QUICK_TENDER_AMOUNTS],
        }).model_dump(mode="json")

    @router.post("/checkout")
    async def complete_checkout(body: CheckoutRequest):
        order_id = checkout.checkout(body.payment_method, body.amount_tendered, card=body.card)
        return success_response({
            "orderId": order_id,
            "cart": _cart_view(session.cart),
        }).model_dump(mode="json")

    return router
