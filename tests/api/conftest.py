"""API test fixtures: the full register app over a mocked back office."""

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from auth.config import AuthConfig
from auth.session import SessionManager
from clients.pos_api_client import PosApiError


PRODUCTS = [
    {"id": 1, "name": "Coffee", "price": "3.50"},
    {"id": 2, "name": "Sandwich", "price": "8.99"},
    {"id": 3, "name": "Gift Card", "price": "25.00", "isTaxable": False},
]

DISCOUNTS = [
    {"id": 10, "name": "Senior Citizen", "type": "percent", "value": "5"},
    {"id": 11, "name": "Happy Hour", "type": "percent", "value": "10"},
]

USERS = {
    ("jdoe", "pw"): {"id": 7, "username": "jdoe", "role": "cashier", "displayName": "Jamie Doe"},
    ("mgr", "secret"): {"id": 2, "username": "mgr", "role": "manager", "displayName": "Morgan Lee"},
}


@pytest.fixture
def auth_config():
    return AuthConfig(session_cookie_secure=False)


@pytest.fixture
def back_office(pos_api):
    """pos_api double answering like the back office."""

    def _login(username, password):
        user = USERS.get((username, password))
        if user is None:
            raise PosApiError("Invalid username or password", status_code=401)
        return {**user, "accessToken": "a", "refreshToken": "r"}

    pos_api.get_products.return_value = PRODUCTS
    pos_api.get_discounts.return_value = DISCOUNTS
    pos_api.get_tax_categories.return_value = [{"id": 1, "rate": "8.25", "isDefault": True}]
    pos_api.get_store_settings.return_value = [{"id": 1, "isActive": True}]
    pos_api.create_order.return_value = {"id": 501}
    pos_api.login.side_effect = _login
    return pos_api


@pytest.fixture
def app(config, auth_config, back_office, valkey):
    return create_app(config=config, auth_config=auth_config, api=back_office, valkey=valkey)


@pytest.fixture
def unauthed_client(app):
    """Client without a session cookie."""
    return TestClient(app, raise_server_exceptions=False)


def _signed_in_client(app, valkey, auth_config, actor):
    token = SessionManager(valkey, auth_config).create_session(actor).token
    client = TestClient(app, raise_server_exceptions=False)
    client.cookies.set(auth_config.session_cookie_name, token)
    return client


@pytest.fixture
def client(app, valkey, auth_config, cashier):
    """Client signed in as a cashier."""
    return _signed_in_client(app, valkey, auth_config, cashier)


@pytest.fixture
def manager_client(app, valkey, auth_config, manager):
    """Client signed in as a manager."""
    return _signed_in_client(app, valkey, auth_config, manager)
