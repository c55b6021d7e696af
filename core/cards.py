"""
Client-side card validation.

No gateway is contacted; these checks only catch typos before an order is
submitted. The brand is inferred for display and is never a reason to reject.
"""

import re
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, Field

from core.exceptions import CardValidationError
from utils.timezone import today_utc

_NON_DIGITS = re.compile(r"\D")
_EXPIRY = re.compile(r"^\s*(\d{1,2})\s*/\s*(\d{2})\s*$")

# Prefix patterns, checked in order
_BRAND_PATTERNS = [
    ("amex", re.compile(r"^3[47]")),
    ("diners", re.compile(r"^3(?:0[0-5]|[689])")),
    ("jcb", re.compile(r"^35(?:2[89]|[3-8])")),
    ("visa", re.compile(r"^4")),
    ("mastercard", re.compile(r"^(?:5[1-5]|2(?:2[2-9]|[3-6]\d|7[01]|720))")),
    ("discover", re.compile(r"^(?:6011|65|64[4-9])")),
    ("unionpay", re.compile(r"^62")),
]


class CardDetails(BaseModel):
    """Card data as typed into the payment dialog."""

    number: str = Field(default="", description="Card number, spaces/dashes allowed")
    expiry: str = Field(default="", description="MM/YY")
    cvc: str = Field(default="")
    cardholder_name: str = Field(default="")


@dataclass(frozen=True)
class CardCheck:
    """Result of a passed validation."""
    brand: str | None
    last4: str


def digits_only(number: str) -> str:
    return _NON_DIGITS.sub("", number or "")


def luhn_check(number: str) -> bool:
    """Luhn (mod 10) checksum over the digits of number."""
    digits = digits_only(number)
    if not digits:
        return False

    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def detect_card_brand(number: str) -> str | None:
    digits = digits_only(number)
    for brand, pattern in _BRAND_PATTERNS:
        if pattern.match(digits):
            return brand
    return None


def parse_expiry(expiry: str) -> tuple[int, int] | None:
    """
    Parse MM/YY into (month, four-digit year).

    Returns None when the text is not a valid expiry.
    """
    match = _EXPIRY.match(expiry or "")
    if not match:
        return None

    month = int(match.group(1))
    year = 2000 + int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return month, year


def validate_card(card: CardDetails | None, today: date | None = None) -> CardCheck:
    """
    Validate card details.

    A card is valid through the last day of its expiry month.

    Args:
        card: Details from the payment dialog
        today: Reference date (defaults to today in UTC)

    Returns:
        CardCheck with the inferred brand and last four digits

    Raises:
        CardValidationError: Naming the first failing field
    """
    if card is None:
        raise CardValidationError("card", "Card details are required")

    digits = digits_only(card.number)
    if not 13 <= len(digits) <= 19:
        raise CardValidationError("number", "Card number must be 13 to 19 digits")
    if not luhn_check(digits):
        raise CardValidationError("number", "Card number is invalid")

    parsed = parse_expiry(card.expiry)
    if parsed is None:
        raise CardValidationError("expiry", "Expiry must be in MM/YY format")
    month, year = parsed
    today = today or today_utc()
    if (year, month) < (today.year, today.month):
        raise CardValidationError("expiry", "Card has expired")

    if not re.fullmatch(r"\d{3,4}", (card.cvc or "").strip()):
        raise CardValidationError("cvc", "CVC must be 3 or 4 digits")

    if not card.cardholder_name.strip():
        raise CardValidationError("cardholder_name", "Cardholder name is required")

    return CardCheck(brand=detect_card_brand(digits), last4=digits[-4:])
