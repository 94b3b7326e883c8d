"""Application service: Product Quantities use case (query).

Reports how many units of each product are committed to orders that
still hold their reservation, i.e. every order that is not cancelled.
"""

from __future__ import annotations

from storefront.domain.repository.unit_of_work import UnitOfWork


class ProductQuantitiesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> dict[int, int]:
        with self._uow:
            return self._uow.orders.units_per_product()
