"""
Audit trail for voids.

Every voided item and every voided order is recorded here. The trail is:
- Append-only (entries never modified or deleted)
- Actor-attributed (which cashier voided)
- Complete (captures the pre-void snapshot: the item, or all items + totals)

Entries go to an AuditTrail backend: in memory for tests, a Valkey list in
production.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, Field

from auth.types import Actor
from clients.valkey_client import ValkeyClient
from utils.timezone import now_utc
from utils.user_context import get_current_actor

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    """Type of audited register action."""

    VOID_ITEM = "void_item"
    VOID_ORDER = "void_order"


class AuditActor(BaseModel):
    """Who performed an audited action."""

    id: int
    username: str

    @classmethod
    def from_actor(cls, actor: Actor | None) -> "AuditActor | None":
        if actor is None:
            return None
        return cls(id=actor.id, username=actor.username)


class AuditEntry(BaseModel):
    """One audit record."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = Field(default_factory=now_utc)
    actor: AuditActor | None = None
    action: AuditAction
    details: dict[str, Any]


class AuditTrail(Protocol):
    """Append-only storage for audit entries."""

    def append(self, entry: AuditEntry) -> None: ...

    def recent(self, limit: int = 100) -> list[AuditEntry]: ...


class InMemoryAuditTrail:
    """Audit trail kept in process memory."""

    def __init__(self):
        self._entries: list[AuditEntry] = []

    def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def recent(self, limit: int = 100) -> list[AuditEntry]:
        """Newest first."""
        return list(reversed(self._entries))[:limit]


class ValkeyAuditTrail:
    """Audit trail stored as a Valkey list of JSON entries (oldest first)."""

    def __init__(self, valkey: ValkeyClient, key: str):
        self._valkey = valkey
        self._key = key

    def append(self, entry: AuditEntry) -> None:
        self._valkey.rpush(self._key, entry.model_dump_json())

    def recent(self, limit: int = 100) -> list[AuditEntry]:
        """Newest first."""
        raw = self._valkey.lrange(self._key, -limit, -1)
        return [AuditEntry.model_validate(json.loads(value)) for value in reversed(raw)]


class AuditLogger:
    """
    Records audited register actions.

    Usage:
        audit = AuditLogger(InMemoryAuditTrail())

        audit.log(
            action=AuditAction.VOID_ITEM,
            details={"item": item.model_dump(mode="json")},
        )

        history = audit.recent()
    """

    def __init__(self, trail: AuditTrail):
        self.trail = trail

    def log(
        self,
        action: AuditAction,
        details: dict[str, Any],
        actor: Actor | None = None,
    ) -> AuditEntry:
        """
        Record an action.

        Args:
            action: The audited action
            details: JSON-compatible snapshot of what was affected
            actor: Who performed it (defaults to the signed-in cashier)

        Details format by action:
        - VOID_ITEM: {"item": {line item}}
        - VOID_ORDER: {"items": [{line item}, ...], "totals": {...}}
        """
        if actor is None:
            actor = get_current_actor()

        entry = AuditEntry(
            actor=AuditActor.from_actor(actor),
            action=action,
            details=details,
        )
        self.trail.append(entry)
        logger.info(
            "Audit %s by %s (entry=%s)",
            action.value,
            actor.username if actor else "unknown",
            entry.id,
        )
        return entry

    def recent(self, limit: int = 100) -> list[AuditEntry]:
        """Most recent entries, newest first."""
        return self.trail.recent(limit)
