"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (SQLAlchemy, in-memory)
live elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int, lock: bool = False) -> Product | None:
        """Return a fresh copy of a product, or None if not found.

        Must re-read the stored row rather than hand back a cached copy,
        otherwise a retry after a version conflict would see stale stock.
        With *lock*, the read sees the latest committed row and holds it
        for the rest of the unit of work where the store supports it.
        """

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, ordered by id."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Persist a new product and assign its id."""

    @abstractmethod
    def compare_and_set_stock(
        self, product_id: int, expected_version: int, units_in_stock: int
    ) -> bool:
        """Write a new stock count if the stored version still matches.

        Bumps the version on success.  Returns False, writing nothing,
        when another writer got there first.
        """
