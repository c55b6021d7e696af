"""Tests for ManagerAuthorizer - discount sign-off by a manager."""

import pytest

from auth.exceptions import ManagerAuthorizationDeniedError
from auth.manager import ManagerAuthorizer
from auth.types import ManagerCredentials
from clients.pos_api_client import PosApiError


@pytest.fixture
def authorizer(pos_api, config):
    return ManagerAuthorizer(pos_api, config)


@pytest.fixture
def credentials():
    return ManagerCredentials(username="mgr", password="secret")


class TestAuthorize:

    def test_manager_is_authorized(self, authorizer, pos_api, credentials):
        pos_api.login.return_value = {
            "id": 2, "username": "mgr", "role": "manager",
            "displayName": "Morgan Lee", "accessToken": "a", "refreshToken": "r",
        }

        manager = authorizer.authorize(credentials)

        assert manager.id == 2
        assert manager.display_name == "Morgan Lee"
        pos_api.login.assert_called_once_with("mgr", "secret")

    def test_admin_is_authorized(self, authorizer, pos_api, credentials):
        pos_api.login.return_value = {"id": 1, "username": "root", "role": "admin"}
        assert authorizer.authorize(credentials).role == "admin"

    @pytest.mark.parametrize("status", [400, 401, 403])
    def test_bad_credentials_denied(self, authorizer, pos_api, credentials, status):
        pos_api.login.side_effect = PosApiError("Invalid username or password", status_code=status)

        with pytest.raises(ManagerAuthorizationDeniedError, match="Invalid manager credentials") as exc_info:
            authorizer.authorize(credentials)
        assert exc_info.value.username == "mgr"

    def test_cashier_role_denied(self, authorizer, pos_api, credentials):
        pos_api.login.return_value = {"id": 7, "username": "jdoe", "role": "cashier"}

        with pytest.raises(ManagerAuthorizationDeniedError, match="not authorized to approve discounts"):
            authorizer.authorize(credentials)

    def test_missing_role_defaults_to_cashier(self, authorizer, pos_api, credentials):
        pos_api.login.return_value = {"id": 7, "username": "jdoe"}

        with pytest.raises(ManagerAuthorizationDeniedError):
            authorizer.authorize(credentials)

    def test_unparseable_response_denied(self, authorizer, pos_api, credentials):
        pos_api.login.return_value = {"accessToken": "a"}

        with pytest.raises(ManagerAuthorizationDeniedError):
            authorizer.authorize(credentials)

    def test_server_failure_propagates(self, authorizer, pos_api, credentials):
        pos_api.login.side_effect = PosApiError("Connection failed")

        with pytest.raises(PosApiError):
            authorizer.authorize(credentials)
