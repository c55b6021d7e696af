"""Tests for PosApiClient - back-office REST client."""

import json

import pytest
import requests
import responses

from clients.pos_api_client import PosApiClient, PosApiError

BASE = "http://backoffice.test/api"


@pytest.fixture
def api():
    return PosApiClient(BASE + "/", timeout_seconds=3)


class TestInit:

    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            PosApiClient("")

    def test_strips_trailing_slash(self, api):
        assert api.base_url == BASE

    def test_bearer_token(self):
        client = PosApiClient(BASE, access_token="tok")
        assert client._session.headers["Authorization"] == "Bearer tok"


class TestReferenceData:

    @pytest.mark.parametrize("method, path", [
        ("get_products", "/products"),
        ("get_categories", "/categories"),
        ("get_discounts", "/discounts"),
        ("get_customers", "/customers"),
        ("get_tax_categories", "/tax-categories"),
        ("get_store_settings", "/store-settings"),
    ])
    @responses.activate
    def test_get_endpoints(self, api, method, path):
        responses.get(BASE + path, json=[{"id": 1}])

        assert getattr(api, method)() == [{"id": 1}]


class TestCreateOrder:

    @responses.activate
    def test_posts_json_body(self, api):
        responses.post(BASE + "/orders", json={"id": 501}, status=201)
        body = {"order": {"total": 10.0}, "items": []}

        assert api.create_order(body) == {"id": 501}
        assert json.loads(responses.calls[0].request.body) == body

    @responses.activate
    def test_server_message_is_surfaced(self, api):
        responses.post(BASE + "/orders", json={"message": "Failed to create order"}, status=500)

        with pytest.raises(PosApiError, match="Failed to create order") as exc_info:
            api.create_order({"order": {}, "items": []})
        assert exc_info.value.status_code == 500

    @responses.activate
    def test_error_key_is_surfaced(self, api):
        responses.post(BASE + "/orders", json={"error": "Invalid order data"}, status=400)

        with pytest.raises(PosApiError, match="Invalid order data"):
            api.create_order({})

    @responses.activate
    def test_non_json_error_body(self, api):
        responses.post(BASE + "/orders", body="<html>oops</html>", status=502)

        with pytest.raises(PosApiError, match="Request failed with status 502"):
            api.create_order({})


class TestFailures:

    @responses.activate
    def test_connection_error(self, api):
        responses.get(BASE + "/products", body=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(PosApiError, match="Connection failed") as exc_info:
            api.get_products()
        assert exc_info.value.status_code is None

    @responses.activate
    def test_invalid_json(self, api):
        responses.get(BASE + "/products", body="not json", status=200)

        with pytest.raises(PosApiError, match="Invalid JSON"):
            api.get_products()


class TestLogin:

    @responses.activate
    def test_returns_user_with_tokens(self, api):
        responses.post(
            BASE + "/auth/login",
            json={"id": 2, "username": "mgr", "role": "manager", "accessToken": "a", "refreshToken": "r"},
        )

        user = api.login("mgr", "secret")

        assert user["role"] == "manager"
        assert json.loads(responses.calls[0].request.body) == {"username": "mgr", "password": "secret"}

    @responses.activate
    def test_bad_credentials(self, api):
        responses.post(BASE + "/auth/login", json={"error": "Invalid username or password"}, status=401)

        with pytest.raises(PosApiError) as exc_info:
            api.login("mgr", "wrong")
        assert exc_info.value.status_code == 401
