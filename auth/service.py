"""Cashier sign-in against the back office."""

import logging

from pydantic import ValidationError

from auth.exceptions import InvalidCredentialsError
from auth.session import SessionManager
from auth.types import Actor, CashierSession
from clients.pos_api_client import PosApiClient, PosApiError

logger = logging.getLogger(__name__)


class AuthService:
    """Signs cashiers in and out of the register.

    Credentials are checked by the back office (POST /auth/login); the
    register only keeps the resulting identity in a session.
    """

    def __init__(self, api: PosApiClient, session_manager: SessionManager):
        self._api = api
        self._session_manager = session_manager

    def sign_in(self, username: str, password: str) -> CashierSession:
        """Verify credentials and open a session.

        Raises:
            InvalidCredentialsError: Back office rejected the credentials.
            PosApiError: Back office failed for another reason.
        """
        try:
            user = self._api.login(username, password)
        except PosApiError as e:
            if e.status_code in (400, 401, 403):
                logger.warning("Sign-in rejected for %s", username)
                raise InvalidCredentialsError("Invalid username or password")
            raise

        try:
            actor = Actor.model_validate(user)
        except ValidationError:
            raise InvalidCredentialsError("Login response did not identify a user")

        session = self._session_manager.create_session(actor)
        logger.info("Cashier %s signed in (role %s)", actor.username, actor.role)
        return session

    def sign_out(self, token: str) -> None:
        """Close a session. Safe to call with unknown tokens."""
        self._session_manager.revoke_session(token)
