"""Tests for CartSession - the active cart slot, held orders, voids and discounts."""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from auth.exceptions import ManagerAuthorizationDeniedError, ManagerAuthorizationRequiredError
from auth.manager import ManagerAuthorizer
from auth.types import ManagerCredentials
from core.audit import AuditAction
from core.cart import CartSession
from core.exceptions import HeldOrderNotFoundError, InvalidCartTransitionError
from core.held_orders import InMemoryHeldOrderStore
from core.models import CartStatus, Product
from core.money import ZERO


class TestItems:

    def test_starts_empty(self, session):
        assert session.cart.status == CartStatus.EMPTY
        assert session.cart.total == ZERO

    def test_add_update_remove(self, session, coffee, sandwich):
        session.add_item(coffee)
        session.add_item(sandwich)
        session.update_quantity(sandwich.id, 3)

        assert session.cart.item_count == 4
        assert session.cart.subtotal == Decimal("30.47")

        session.remove_item(coffee.id)
        assert [item.product_id for item in session.cart.items] == [sandwich.id]

    def test_update_to_zero_removes(self, session, coffee):
        session.add_item(coffee)
        session.update_quantity(coffee.id, 0)
        assert session.cart.is_empty

    def test_set_tax_rate_reprices(self, session, coffee):
        session.add_item(coffee)
        session.set_tax_rate("10")

        assert session.tax_rate_percent == Decimal("10")
        assert session.cart.tax == Decimal("0.35")

    def test_invalid_tax_rate_is_zero(self, session, coffee):
        session.add_item(coffee)
        session.set_tax_rate("abc")
        assert session.cart.tax == ZERO

    def test_refresh_tax_rate_reprices_on_change(self, session, coffee):
        session.add_item(coffee)

        cart = session.refresh_tax_rate("10")

        assert cart.tax == Decimal("0.35")
        assert session.tax_rate_percent == Decimal("10")

    def test_refresh_tax_rate_unchanged_keeps_cart(self, session, coffee):
        cart = session.add_item(coffee)

        assert session.refresh_tax_rate(Decimal("8.25")) is cart

    def test_default_tax_rate_from_config(self, held_store, event_bus, config):
        session = CartSession(held_store, event_bus, config)
        assert session.tax_rate_percent == Decimal("8.25")


class TestHeldOrders:

    def test_hold_and_retrieve_round_trip(self, session, coffee, sandwich, gift_card):
        session.add_item(coffee)
        session.add_item(sandwich, quantity=2)
        session.add_item(gift_card)
        before = session.cart

        hold_id = session.hold_order("Table 4")

        assert session.cart.is_empty
        held = session.list_held_orders()
        assert len(held) == 1
        assert held[0].name == "Table 4"
        assert held[0].cart.items == before.items

        cart = session.retrieve_held_order(hold_id)

        assert cart.items == before.items
        assert cart.total == before.total
        assert cart.is_on_hold is False
        assert session.list_held_orders() == []

    def test_default_name_counts_held_orders(self, session, coffee):
        session.add_item(coffee)
        session.hold_order()
        session.add_item(coffee)
        session.hold_order("   ")

        assert [h.name for h in session.list_held_orders()] == ["Order #1", "Order #2"]

    def test_hold_ids_are_unique(self, session, coffee):
        ids = set()
        for _ in range(3):
            session.add_item(coffee)
            ids.add(session.hold_order())
        assert len(ids) == 3

    def test_hold_empty_cart_rejected(self, session):
        with pytest.raises(InvalidCartTransitionError):
            session.hold_order("Nothing")
        assert session.list_held_orders() == []

    def test_storage_failure_leaves_cart_untouched(self, event_bus, coffee):
        store = Mock(spec=InMemoryHeldOrderStore)
        store.list_all.return_value = []
        store.add.side_effect = ConnectionError("valkey down")
        session = CartSession(store, event_bus)
        session.add_item(coffee)

        with pytest.raises(ConnectionError):
            session.hold_order("Table 1")

        assert session.cart.find_item(coffee.id) is not None

    def test_retrieve_unknown_raises(self, session):
        with pytest.raises(HeldOrderNotFoundError):
            session.retrieve_held_order("nope")

    def test_retrieve_discards_active_cart_by_default(self, session, coffee, sandwich, event_bus):
        retrieved = []
        event_bus.subscribe("HeldOrderRetrieved", retrieved.append)
        session.add_item(coffee)
        hold_id = session.hold_order()
        session.add_item(sandwich)

        cart = session.retrieve_held_order(hold_id)

        assert [item.product_id for item in cart.items] == [coffee.id]
        assert retrieved[0].discarded_cart.find_item(sandwich.id) is not None

    def test_retrieve_can_refuse_to_discard(self, session, coffee, sandwich):
        session.add_item(coffee)
        hold_id = session.hold_order()
        session.add_item(sandwich)

        with pytest.raises(InvalidCartTransitionError):
            session.retrieve_held_order(hold_id, discard_active=False)

        assert session.cart.find_item(sandwich.id) is not None
        assert len(session.list_held_orders()) == 1

    def test_delete(self, session, coffee):
        session.add_item(coffee)
        hold_id = session.hold_order()

        session.delete_held_order(hold_id)

        assert session.list_held_orders() == []
        with pytest.raises(HeldOrderNotFoundError):
            session.delete_held_order(hold_id)

    def test_held_orders_survive_a_new_session(self, held_store, event_bus, coffee):
        first = CartSession(held_store, event_bus)
        first.add_item(coffee)
        hold_id = first.hold_order("Carry over")

        second = CartSession(held_store, event_bus)
        cart = second.retrieve_held_order(hold_id)

        assert cart.find_item(coffee.id).quantity == 1


class TestVoids:

    def test_void_item_is_audited(self, session, coffee, sandwich, audit_trail, as_cashier):
        session.add_item(coffee)
        session.add_item(sandwich)

        session.void_item(sandwich.id)

        assert session.cart.find_item(sandwich.id) is None
        entry = audit_trail.recent()[0]
        assert entry.action == AuditAction.VOID_ITEM
        assert entry.actor.username == as_cashier.username
        assert entry.details["item"]["product_id"] == sandwich.id

    def test_void_order_records_items_and_totals(self, session, coffee, sandwich, audit_trail, as_cashier):
        session.add_item(coffee)
        session.add_item(sandwich, quantity=2)
        total = session.cart.total

        session.void_order()

        assert session.cart.is_empty
        entry = audit_trail.recent()[0]
        assert entry.action == AuditAction.VOID_ORDER
        assert len(entry.details["items"]) == 2
        assert entry.details["totals"]["total"] == str(total)

    def test_void_missing_item_writes_nothing(self, session, coffee, audit_trail):
        session.add_item(coffee)
        session.void_item(999)
        assert audit_trail.recent() == []

    def test_void_empty_order_rejected(self, session):
        with pytest.raises(InvalidCartTransitionError):
            session.void_order()

    def test_audit_failure_does_not_block_void(self, held_store, event_bus, coffee):
        def broken(event):
            raise RuntimeError("audit backend down")

        event_bus.subscribe("OrderVoided", broken)
        session = CartSession(held_store, event_bus)
        session.add_item(coffee)

        session.void_order()

        assert session.cart.is_empty


class TestApplyDiscount:

    def test_manager_applies_without_credentials(self, session, coffee, ten_percent, as_manager):
        session.add_item(coffee)
        cart = session.apply_discount(ten_percent)
        assert cart.discount == Decimal("0.35")

    def test_cashier_needs_credentials(self, session, coffee, ten_percent, as_cashier):
        session.add_item(coffee)

        with pytest.raises(ManagerAuthorizationRequiredError):
            session.apply_discount(ten_percent)

        assert session.cart.discount == ZERO

    def test_cashier_with_valid_manager_credentials(self, held_store, event_bus, config, coffee, ten_percent, manager, as_cashier):
        authorizer = Mock(spec=ManagerAuthorizer)
        authorizer.authorize.return_value = manager
        session = CartSession(held_store, event_bus, config, manager_authorizer=authorizer)
        session.add_item(coffee)
        credentials = ManagerCredentials(username="mgr", password="secret")

        cart = session.apply_discount(ten_percent, manager_credentials=credentials)

        authorizer.authorize.assert_called_once_with(credentials)
        assert cart.applied_discount.id == ten_percent.id

    def test_denied_credentials_leave_cart_unchanged(self, held_store, event_bus, config, coffee, ten_percent, as_cashier):
        authorizer = Mock(spec=ManagerAuthorizer)
        authorizer.authorize.side_effect = ManagerAuthorizationDeniedError("Invalid manager credentials")
        session = CartSession(held_store, event_bus, config, manager_authorizer=authorizer)
        session.add_item(coffee)

        with pytest.raises(ManagerAuthorizationDeniedError):
            session.apply_discount(
                ten_percent,
                manager_credentials=ManagerCredentials(username="mgr", password="wrong"),
            )

        assert session.cart.discount == ZERO
        assert session.cart.applied_discount is None

    def test_removing_discount_needs_no_authorization(self, session, coffee, ten_percent, as_manager):
        session.add_item(coffee)
        session.apply_discount(ten_percent)
        session.apply_discount(None)
        assert session.cart.discount == ZERO


class TestCompleteCheckout:

    def test_clears_cart(self, session, coffee):
        session.add_item(coffee)
        session.complete_checkout(42)
        assert session.cart.is_empty

    def test_empty_cart_rejected(self, session):
        with pytest.raises(InvalidCartTransitionError):
            session.complete_checkout(42)

    def test_invalid_product_price_is_zero(self, session):
        session.add_item(Product(id=5, name="Bad", price=None))
        assert session.cart.items[0].unit_price == ZERO
