"""
Discount resolution: turns a discount rule into an absolute amount.

Senior citizen discounts are a fixed rate of the subtotal regardless of the
rule's own type and value. The category is resolved once, when the Discount
is built, so pricing never re-matches names.

Resolution never raises. Malformed values degrade to 0 so a bad discount
record can't block checkout.
"""

import logging
from decimal import Decimal
from typing import Any

from auth.types import Actor
from core.config import RegisterConfig
from core.models import Discount, DiscountCategory, DiscountType, categorize_discount
from core.money import ZERO, is_falsy_amount, round2, to_safe_number

logger = logging.getLogger(__name__)

DEFAULT_SENIOR_RATE = Decimal("0.20")
_HUNDRED = Decimal(100)

__all__ = [
    "DEFAULT_SENIOR_RATE",
    "categorize_discount",
    "requires_manager_authorization",
    "resolve_discount_amount",
]


def resolve_discount_amount(
    discount: Discount | None,
    subtotal: Any,
    senior_rate: Decimal = DEFAULT_SENIOR_RATE,
) -> Decimal:
    """
    Compute the absolute discount for a subtotal.

    Args:
        discount: Rule to apply, or None for no discount
        subtotal: Cart subtotal the discount applies to
        senior_rate: Fraction taken off for senior citizen discounts

    Returns:
        Discount amount rounded to cents; 0 when nothing applies or on error
    """
    if discount is None:
        return ZERO

    try:
        base = to_safe_number(subtotal)
        if is_falsy_amount(discount.value) or base <= 0:
            return ZERO

        if discount.category == DiscountCategory.SENIOR_CITIZEN:
            return round2(base * to_safe_number(senior_rate))

        if discount.type == DiscountType.PERCENT:
            amount = round2(base * to_safe_number(discount.value) / _HUNDRED)
        else:
            amount = round2(to_safe_number(discount.value))

        # Negative rules would raise the total
        return max(ZERO, amount)
    except Exception:
        logger.warning(
            "Discount %s (%r) could not be resolved, applying none",
            discount.id,
            discount.name,
            exc_info=True,
        )
        return ZERO


def requires_manager_authorization(
    discount: Discount | None,
    actor: Actor | None,
    config: RegisterConfig,
) -> bool:
    """
    Whether applying `discount` needs a manager's sign-off.

    Removing a discount never does. Privileged actors never do. Otherwise
    every discount does, unless the register is configured to gate only
    restricted-access discounts.
    """
    if discount is None:
        return False
    if actor is not None and actor.has_role(config.privileged_roles):
        return False
    if config.require_manager_for_all_discounts:
        return True
    return discount.restricted_access
