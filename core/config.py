"""Register configuration."""

import os
from decimal import Decimal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_ENV_PREFIX = "POS_"


class RegisterConfig(BaseModel):
    """
    Register configuration.

    Rates are in their natural units: tax as a percent (8.25 = 8.25%),
    the senior citizen discount as a fraction (0.20 = 20%).
    """

    # Back-office API
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the back-office REST API",
    )
    api_timeout_seconds: int = Field(
        default=10,
        description="Timeout for every back-office request",
        ge=1,
        le=120,
    )

    # Pricing
    default_tax_rate_percent: Decimal = Field(
        default=Decimal("8.25"),
        description="Tax rate used when no tax category or store rate is available",
        ge=0,
        le=100,
    )
    senior_discount_rate: Decimal = Field(
        default=Decimal("0.20"),
        description="Fixed rate applied to senior citizen discounts",
        ge=0,
        le=1,
    )

    # Discount authorization
    privileged_roles: list[str] = Field(
        default_factory=lambda: ["admin", "manager"],
        description="Roles that may apply discounts without manager sign-off",
    )
    require_manager_for_all_discounts: bool = Field(
        default=True,
        description="If false, only restricted-access discounts need manager sign-off",
    )

    # Payment methods
    cash_payment_methods: list[str] = Field(
        default_factory=lambda: ["cash"],
        description="Methods that take a tendered amount and give change",
    )
    card_payment_methods: list[str] = Field(
        default_factory=lambda: ["card", "credit", "debit"],
        description="Methods that require card details",
    )

    # Local storage
    valkey_url: str = Field(
        default="redis://localhost:6379/0",
        description="Valkey connection URL for held orders and the audit trail",
    )
    held_orders_key: str = Field(
        default="pos:held_orders",
        description="Key holding the JSON array of held orders",
    )
    audit_log_key: str = Field(
        default="pos:audit_log",
        description="List key receiving void audit entries",
    )

    def is_cash(self, payment_method: str) -> bool:
        return payment_method.lower() in {m.lower() for m in self.cash_payment_methods}

    def is_card(self, payment_method: str) -> bool:
        return payment_method.lower() in {m.lower() for m in self.card_payment_methods}


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def load_config(env_file: str | None = None) -> RegisterConfig:
    """
    Build a RegisterConfig from POS_* environment variables.

    A .env file is loaded first (without overriding variables already set).
    Unset variables fall back to the model defaults; invalid values raise
    pydantic.ValidationError.
    """
    load_dotenv(env_file)

    list_fields = {"privileged_roles", "cash_payment_methods", "card_payment_methods"}
    values = {}
    for name in RegisterConfig.model_fields:
        raw = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        values[name] = _split_list(raw) if name in list_fields else raw

    return RegisterConfig(**values)
