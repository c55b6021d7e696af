"""Discount domain models.

Discounts are read-only here; the back office owns them. The value is kept
raw because upstream data may be malformed ("abc", "", null). Coercion
happens in the resolver, which never raises.
"""

from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from core.models.base import WireModel

_SENIOR_MARKER = "senior"


class DiscountType(str, Enum):
    """How a discount's value is interpreted."""

    PERCENT = "percent"
    AMOUNT = "amount"


class DiscountCategory(str, Enum):
    """Business category that can override the generic type/value rule."""

    STANDARD = "standard"
    SENIOR_CITIZEN = "senior_citizen"  # Fixed-rate override, ignores type/value


def categorize_discount(name: str | None) -> DiscountCategory:
    """
    Resolve the category from a discount's display name.

    Any name containing "senior" (case-insensitive) - "Senior", "Senior
    Citizen Discount", "SENIOR 65+" - is a senior citizen discount.
    """
    if name and _SENIOR_MARKER in name.lower():
        return DiscountCategory.SENIOR_CITIZEN
    return DiscountCategory.STANDARD


class Discount(WireModel):
    """A discount rule as defined in the back office."""

    id: int | None = None
    name: str = ""
    type: DiscountType = DiscountType.AMOUNT
    value: Any = None
    restricted_access: bool = False
    category: DiscountCategory | None = Field(
        None,
        description="Resolved from the name when not supplied",
    )

    @model_validator(mode="after")
    def resolve_category(self) -> "Discount":
        """Resolve the category once so pricing never re-matches the name."""
        if self.category is None:
            self.category = categorize_discount(self.name)
        return self

    @property
    def is_senior(self) -> bool:
        return self.category == DiscountCategory.SENIOR_CITIZEN


class AppliedDiscount(WireModel):
    """Reference kept on the cart to the rule that produced its discount amount."""

    id: int | None = None
    name: str
    category: DiscountCategory = DiscountCategory.STANDARD

    @classmethod
    def from_discount(cls, discount: Discount) -> "AppliedDiscount":
        return cls(id=discount.id, name=discount.name, category=discount.category)
