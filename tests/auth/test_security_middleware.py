"""Tests for AuthMiddleware - session validation and actor context."""

from unittest.mock import Mock

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from auth.security_middleware import AuthMiddleware
from auth.session import SessionManager
from auth.types import CashierSession
from auth.exceptions import SessionExpiredError
from utils.timezone import now_utc
from utils.user_context import get_current_actor


@pytest.fixture
def mock_session_manager():
    """Mock SessionManager."""
    return Mock(spec=SessionManager)


def _session(actor, token="valid-token"):
    now = now_utc()
    return CashierSession(
        token=token,
        actor=actor,
        created_at=now,
        expires_at=now,
        last_activity_at=now,
    )


@pytest.fixture
def app_with_middleware(mock_session_manager):
    """FastAPI app with auth middleware."""
    app = FastAPI()

    app.add_middleware(
        AuthMiddleware,
        session_manager=mock_session_manager,
    )

    @app.get("/register/cart")
    async def protected_route(request: Request):
        actor = get_current_actor()
        return {
            "state_username": request.state.actor.username,
            "context_username": actor.username if actor else None,
        }

    @app.post("/register/login")
    async def login():
        return {"public": True}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/openapi.json")
    async def openapi():
        return {"openapi": "3.0"}

    return app


class TestPublicPaths:
    """Public paths skip authentication."""

    @pytest.mark.parametrize("method, path", [
        ("post", "/register/login"),
        ("get", "/health"),
        ("get", "/openapi.json"),
    ])
    def test_no_cookie_succeeds(self, app_with_middleware, mock_session_manager, method, path):
        client = TestClient(app_with_middleware)

        response = getattr(client, method)(path)

        assert response.status_code == 200
        mock_session_manager.validate_session.assert_not_called()

    def test_invalid_cookie_still_succeeds(self, app_with_middleware, mock_session_manager):
        mock_session_manager.validate_session.side_effect = SessionExpiredError()
        client = TestClient(app_with_middleware, cookies={"session_token": "stale"})

        assert client.get("/health").status_code == 200


class TestProtectedPaths:
    """Protected paths need a live session."""

    def test_no_cookie_returns_401(self, app_with_middleware):
        client = TestClient(app_with_middleware)

        response = client.get("/register/cart")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    def test_expired_session_returns_401(self, app_with_middleware, mock_session_manager):
        mock_session_manager.validate_session.side_effect = SessionExpiredError("expired")
        client = TestClient(app_with_middleware, cookies={"session_token": "old"})

        response = client.get("/register/cart")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "SESSION_EXPIRED"

    def test_valid_session_sets_actor(self, app_with_middleware, mock_session_manager, cashier):
        mock_session_manager.validate_session.return_value = _session(cashier)
        client = TestClient(app_with_middleware, cookies={"session_token": "valid-token"})

        response = client.get("/register/cart")

        assert response.status_code == 200
        assert response.json() == {"state_username": "jdoe", "context_username": "jdoe"}
        mock_session_manager.validate_session.assert_called_once_with("valid-token")


class TestActorContext:

    def test_each_request_sees_its_own_actor(
        self, app_with_middleware, mock_session_manager, cashier, manager
    ):
        sessions = {"a": _session(cashier, "a"), "b": _session(manager, "b")}
        mock_session_manager.validate_session.side_effect = sessions.__getitem__

        first = TestClient(app_with_middleware, cookies={"session_token": "a"}).get("/register/cart")
        second = TestClient(app_with_middleware, cookies={"session_token": "b"}).get("/register/cart")

        assert first.json()["context_username"] == "jdoe"
        assert second.json()["context_username"] == "mgr"

    def test_context_cleared_after_request(self, app_with_middleware, mock_session_manager, cashier):
        mock_session_manager.validate_session.return_value = _session(cashier)
        client = TestClient(app_with_middleware, cookies={"session_token": "valid-token"})

        client.get("/register/cart")

        assert get_current_actor() is None


class TestCookieName:

    def test_custom_cookie_name(self, mock_session_manager, cashier):
        mock_session_manager.validate_session.return_value = _session(cashier)
        app = FastAPI()
        app.add_middleware(AuthMiddleware, session_manager=mock_session_manager, cookie_name="pos_sid")

        @app.get("/register/cart")
        async def protected(request: Request):
            return {"ok": True}

        assert TestClient(app, cookies={"session_token": "x"}).get("/register/cart").status_code == 401
        assert TestClient(app, cookies={"pos_sid": "x"}).get("/register/cart").status_code == 200
