"""Shared test fixtures for the register test suite."""

import json
from decimal import Decimal
from unittest.mock import Mock

import pytest

from auth.types import Actor
from clients.pos_api_client import PosApiClient
from clients.valkey_client import ValkeyClient
from core.audit import AuditLogger, InMemoryAuditTrail
from core.cart import CartSession
from core.config import RegisterConfig
from core.event_bus import EventBus
from core.handlers.void_audit_handler import register_void_audit_handlers
from core.held_orders import InMemoryHeldOrderStore
from core.models import Discount, Product
from utils.user_context import actor_context, clear_current_actor


# =============================================================================
# ACTOR FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_actor_context():
    """Ensure clean actor context before and after each test."""
    clear_current_actor()
    yield
    clear_current_actor()


@pytest.fixture
def cashier() -> Actor:
    return Actor(id=7, username="jdoe", display_name="Jamie Doe", role="cashier", store_id=1)


@pytest.fixture
def manager() -> Actor:
    return Actor(id=2, username="mgr", display_name="Morgan Lee", role="manager", store_id=1)


@pytest.fixture
def as_cashier(cashier):
    """Run the test with the cashier signed in."""
    with actor_context(cashier):
        yield cashier


@pytest.fixture
def as_manager(manager):
    """Run the test with a manager signed in."""
    with actor_context(manager):
        yield manager


# =============================================================================
# CATALOG FIXTURES
# =============================================================================


@pytest.fixture
def coffee() -> Product:
    return Product(id=1, name="Coffee", price="3.50")


@pytest.fixture
def sandwich() -> Product:
    return Product(id=2, name="Sandwich", price="8.99")


@pytest.fixture
def gift_card() -> Product:
    """Non-taxable product."""
    return Product(id=3, name="Gift Card", price="25.00", is_taxable=False)


@pytest.fixture
def senior_discount() -> Discount:
    return Discount(id=10, name="Senior Citizen", type="percent", value="5")


@pytest.fixture
def ten_percent() -> Discount:
    return Discount(id=11, name="Happy Hour", type="percent", value="10")


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def config() -> RegisterConfig:
    return RegisterConfig()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def audit_trail() -> InMemoryAuditTrail:
    return InMemoryAuditTrail()


@pytest.fixture
def audit(audit_trail) -> AuditLogger:
    return AuditLogger(audit_trail)


@pytest.fixture
def held_store() -> InMemoryHeldOrderStore:
    return InMemoryHeldOrderStore()


@pytest.fixture
def session(held_store, event_bus, audit, config) -> CartSession:
    """CartSession at 8.25% tax with void auditing wired."""
    register_void_audit_handlers(event_bus, audit)
    return CartSession(
        held_orders=held_store,
        event_bus=event_bus,
        config=config,
        tax_rate_percent=Decimal("8.25"),
    )


@pytest.fixture
def pos_api():
    """Back-office client double."""
    return Mock(spec=PosApiClient)


# =============================================================================
# VALKEY FIXTURE
# =============================================================================


def _lrange(lists: dict, key: str, start: int, end: int) -> list[str]:
    items = lists.get(key, [])
    n = len(items)
    start = start if start >= 0 else max(0, n + start)
    end = end if end >= 0 else n + end
    return items[start:end + 1]


@pytest.fixture
def valkey():
    """ValkeyClient double backed by dicts (exposed as .store and .lists)."""
    store: dict[str, str] = {}
    lists: dict[str, list[str]] = {}

    def _rpush(key, value):
        lists.setdefault(key, []).append(value)
        return len(lists[key])

    mock = Mock(spec=ValkeyClient)
    mock.ping.return_value = True
    mock.get.side_effect = store.get
    mock.set.side_effect = lambda key, value, expire_seconds=None: store.__setitem__(key, value)
    mock.delete.side_effect = lambda key: store.pop(key, None) is not None
    mock.set_json.side_effect = (
        lambda key, value, expire_seconds=None: store.__setitem__(key, json.dumps(value))
    )
    mock.get_json.side_effect = lambda key: json.loads(store[key]) if key in store else None
    mock.rpush.side_effect = _rpush
    mock.lrange.side_effect = lambda key, start, end: _lrange(lists, key, start, end)
    mock.store = store
    mock.lists = lists
    return mock
