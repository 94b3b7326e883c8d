"""Product aggregate.

Products live independently of orders.  A product owns its stock count,
but nothing outside the Stock Ledger is allowed to change it: the
ledger writes through ``ProductRepository.compare_and_set_stock`` so
every write is checked against the ``version`` it was computed from.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog together with its available stock.

    Invariant: ``units_in_stock`` is never negative.
    """

    id: int | None
    name: str
    price: Money
    units_in_stock: int = 0
    description: str = ""
    version: int = 0

    @staticmethod
    def create(
        name: str,
        price: Money,
        units_in_stock: int = 0,
        description: str = "",
    ) -> Product:
        """Create a new catalog entry, enforcing all invariants."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if units_in_stock < 0:
            raise ValidationError("Units in stock cannot be negative")
        return Product(
            id=None,
            name=name.strip(),
            price=price,
            units_in_stock=units_in_stock,
            description=description,
        )


@dataclass(frozen=True)
class StockSnapshot:
    """Point-in-time view of a product's stock, for presentation."""

    product_id: int
    name: str
    units_in_stock: int

    @staticmethod
    def of(product: Product) -> StockSnapshot:
        return StockSnapshot(
            product_id=product.id,  # type: ignore[arg-type]
            name=product.name,
            units_in_stock=product.units_in_stock,
        )
