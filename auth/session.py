"""Cashier session lifecycle management.

Sessions are stored in Valkey with TTL matching session expiry.
Token format is cryptographically random (secrets.token_urlsafe).
"""

import secrets
from datetime import timedelta

from clients.valkey_client import ValkeyClient
from auth.config import AuthConfig
from auth.types import Actor, CashierSession
from auth.exceptions import SessionExpiredError
from utils.timezone import now_utc, parse_iso


class SessionManager:
    """Cashier session lifecycle management.

    The signed-in Actor is stored with the session so requests don't need a
    back-office round trip. Sessions slide: every validation extends them.
    """

    def __init__(self, valkey: ValkeyClient, config: AuthConfig):
        self._valkey = valkey
        self._config = config

    def _key(self, token: str) -> str:
        """Generate Valkey key for session token."""
        return f"{self._config.session_key_prefix}{token}"

    def _save(self, session: CashierSession) -> None:
        self._valkey.set_json(
            self._key(session.token),
            {
                "actor": session.actor.model_dump(mode="json"),
                "created_at": session.created_at.isoformat(),
                "expires_at": session.expires_at.isoformat(),
                "last_activity_at": session.last_activity_at.isoformat(),
            },
            expire_seconds=self._config.session_expiry_hours * 3600,
        )

    def create_session(self, actor: Actor) -> CashierSession:
        """Create new session for a signed-in cashier."""
        now = now_utc()
        session = CashierSession(
            token=secrets.token_urlsafe(32),
            actor=actor,
            created_at=now,
            expires_at=now + timedelta(hours=self._config.session_expiry_hours),
            last_activity_at=now,
        )
        self._save(session)
        return session

    def validate_session(self, token: str) -> CashierSession:
        """Validate session token and return session.

        Raises SessionExpiredError if token invalid or expired.
        """
        data = self._valkey.get_json(self._key(token))

        if data is None:
            raise SessionExpiredError("Session not found or expired")

        session = CashierSession(
            token=token,
            actor=Actor.model_validate(data["actor"]),
            created_at=parse_iso(data["created_at"]),
            expires_at=parse_iso(data["expires_at"]),
            last_activity_at=parse_iso(data["last_activity_at"]),
        )

        now = now_utc()

        # Valkey TTL should already have dropped it
        if now > session.expires_at:
            self._valkey.delete(self._key(token))
            raise SessionExpiredError("Session expired")

        updated = session.model_copy(update={
            "expires_at": now + timedelta(hours=self._config.session_expiry_hours),
            "last_activity_at": now,
        })
        self._save(updated)
        return updated

    def revoke_session(self, token: str) -> None:
        """Revoke session (sign out).

        Safe to call with nonexistent token.
        """
        self._valkey.delete(self._key(token))
