"""Catalog read models consumed by the register."""

from typing import Any

from core.models.base import WireModel


class Product(WireModel):
    """
    A product as listed by the back office.

    Only the fields the cart needs. `price` stays raw (the API serializes
    numerics as strings) and is coerced when the product is added.
    """

    id: int | None = None
    name: str | None = None
    price: Any = None
    is_taxable: bool = True


class TaxCategory(WireModel):
    """A configured tax category; the default one sets the register's rate."""

    id: int | None = None
    name: str | None = None
    rate: Any = None
    is_default: bool = False


class StoreSettings(WireModel):
    """Store configuration; supplies the store id and the fallback tax rate."""

    id: int | None = None
    name: str | None = None
    tax_rate: Any = None
    is_active: bool = True
