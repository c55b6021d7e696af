"""
Reference data from the back office.

Tax rate lookups degrade to the configured default (8.25%) on any failure;
the register keeps working when the back office is unreachable. Store
resolution does not degrade: an order cannot be submitted without a store.
"""

import logging
from decimal import Decimal

from pydantic import ValidationError

from clients.pos_api_client import PosApiClient, PosApiError
from core.config import RegisterConfig
from core.exceptions import StoreNotConfiguredError
from core.models import Discount, Product, StoreSettings, TaxCategory
from core.money import to_safe_number

logger = logging.getLogger(__name__)


class ReferenceDataService:
    """Reads tax, store and discount data used by the cart and checkout."""

    def __init__(self, api: PosApiClient, config: RegisterConfig):
        self.api = api
        self.config = config

    def tax_rate_percent(self) -> Decimal:
        """
        Resolve the register's tax rate.

        Order: rate of the default tax category, then the store settings
        rate, then the configured default. Only a missing rate falls through;
        a configured 0 is a tax-exempt store. A rate that is not a number
        resolves to 0.
        """
        try:
            categories = [TaxCategory.model_validate(c) for c in self.api.get_tax_categories() or []]
            default_category = next((c for c in categories if c.is_default), None)
            if default_category is not None and default_category.rate is not None:
                return to_safe_number(default_category.rate, fallback=0)

            store = self._pick_store(self.api.get_store_settings())
            if store is not None and store.tax_rate is not None:
                return to_safe_number(store.tax_rate, fallback=0)
        except (PosApiError, ValidationError, TypeError) as e:
            logger.warning(f"Failed to fetch tax rate, using default: {e}")

        return self.config.default_tax_rate_percent

    def active_store_id(self) -> int:
        """
        Id of the store orders are recorded against.

        Raises:
            StoreNotConfiguredError: If no store (or a store without id) is configured
            PosApiError: If the settings can't be fetched
        """
        store = self._pick_store(self.api.get_store_settings())
        if store is None:
            raise StoreNotConfiguredError(
                "No active store found. Please configure store settings first."
            )
        if store.id is None:
            raise StoreNotConfiguredError(
                "Invalid store configuration. Please check store settings."
            )
        return store.id

    def list_discounts(self) -> list[Discount]:
        """All discounts; malformed records are skipped with a warning."""
        discounts = []
        for raw in self.api.get_discounts() or []:
            try:
                discounts.append(Discount.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed discount {raw!r}: {e}")
        return discounts

    def get_discount(self, discount_id: int) -> Discount:
        """
        Find a discount by id.

        Raises:
            ValueError: If no discount has that id
        """
        for discount in self.list_discounts():
            if discount.id == discount_id:
                return discount
        raise ValueError(f"Discount {discount_id} not found")

    def get_product(self, product_id: int) -> Product:
        """
        Find a product by id.

        Raises:
            ValueError: If no product has that id
        """
        for raw in self.api.get_products() or []:
            product = Product.model_validate(raw)
            if product.id == product_id:
                return product
        raise ValueError(f"Product {product_id} not found")

    @staticmethod
    def _pick_store(settings: dict | list | None) -> StoreSettings | None:
        """First active store of a list (else the first), or the single object."""
        if not settings:
            return None
        if isinstance(settings, list):
            stores = [StoreSettings.model_validate(s) for s in settings]
            return next((s for s in stores if s.is_active), stores[0])
        return StoreSettings.model_validate(settings)
