"""
Pricing engine: subtotal, tax and total from line items.

Pure functions over their inputs. Tax applies only to taxable lines; the
subtotal covers every line. The total never goes below zero - a discount
larger than subtotal + tax is absorbed, not reported.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from core.models import LineItem
from core.money import ZERO, round2, to_safe_number

_HUNDRED = Decimal(100)


@dataclass(frozen=True)
class Totals:
    """Derived monetary fields of a cart."""

    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO

    def as_dict(self) -> dict[str, str]:
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
        }


def compute_tax(taxable_base: Any, tax_rate_percent: Any) -> Decimal:
    """Tax on `taxable_base` at a percent rate. A missing or NaN rate is 0%."""
    rate = to_safe_number(tax_rate_percent, fallback=0)
    return round2(to_safe_number(taxable_base) * rate / _HUNDRED)


def recompute(
    items: Iterable[LineItem],
    discount: Any,
    tax_rate_percent: Any,
) -> Totals:
    """
    Compute subtotal, tax and total.

    Args:
        items: Cart line items
        discount: Absolute discount amount (already resolved)
        tax_rate_percent: Tax rate in percent (8.25 = 8.25%); None/NaN -> 0

    Returns:
        Totals, every field rounded half-up to cents
    """
    items = list(items)
    if not items:
        return Totals()

    subtotal = round2(sum((item.line_total for item in items), ZERO))
    taxable_base = round2(
        sum((item.line_total for item in items if item.is_taxable), ZERO)
    )
    tax = compute_tax(taxable_base, tax_rate_percent)
    total = round2(max(ZERO, subtotal + tax - round2(discount)))

    return Totals(subtotal=subtotal, tax=tax, total=total)
