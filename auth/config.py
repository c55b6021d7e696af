"""Cashier sign-in configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Cashier sign-in configuration.

    Durations are in hours; a register shift is the natural unit.
    """

    session_expiry_hours: int = Field(
        default=12,
        description="Session lifetime in hours (extended on activity)",
        ge=1,
        le=168,
    )
    session_key_prefix: str = Field(
        default="pos:session:",
        description="Valkey key prefix for cashier sessions",
    )
    session_cookie_name: str = Field(
        default="session_token",
        description="Cookie carrying the session token",
    )
    session_cookie_secure: bool = Field(
        default=True,
        description="Send the session cookie over HTTPS only",
    )
