"""Application service: Add Product / Restock Product use cases."""

from __future__ import annotations

import structlog

from storefront.domain.model.product import Product, StockSnapshot
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import DEFAULT_MAX_RETRIES, StockLedger

logger = structlog.get_logger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        price: str,
        units_in_stock: int = 0,
        description: str = "",
    ) -> Product:
        """Add a new product to the catalog with its opening stock."""
        product = Product.create(
            name=name,
            price=Money.of(price),
            units_in_stock=units_in_stock,
            description=description,
        )

        with self._uow:
            self._uow.products.add(product)
            self._uow.commit()

        logger.info(
            "Product added",
            product_id=product.id,
            name=product.name,
            units_in_stock=product.units_in_stock,
        )
        return product


class RestockProductHandler:

    def __init__(self, uow: UnitOfWork, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._uow = uow
        self._max_retries = max_retries

    def handle(self, product_id: int, quantity: int) -> StockSnapshot:
        """Add received goods to a product's stock."""
        with self._uow:
            ledger = StockLedger(self._uow, self._max_retries)
            ledger.restock(product_id, quantity)
            snapshot = ledger.snapshot(product_id)
            self._uow.commit()
        return snapshot
