"""Pydantic models for register actors."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Actor(BaseModel):
    """A back-office user operating the register (cashier, manager, admin)."""

    id: int
    username: str = Field(..., min_length=1)
    display_name: str | None = None
    role: str = "cashier"
    store_id: int | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def has_role(self, roles: list[str] | set[str]) -> bool:
        """Whether this actor's role is one of `roles` (case-insensitive)."""
        return self.role.lower() in {r.lower() for r in roles}


class ManagerCredentials(BaseModel):
    """Credentials typed in by a manager to authorize a discount."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class CashierSession(BaseModel):
    """A signed-in cashier at the register."""

    token: str = Field(..., description="Session token (opaque string)")
    actor: Actor
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime
