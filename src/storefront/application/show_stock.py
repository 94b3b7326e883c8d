"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from storefront.domain.model.product import StockSnapshot
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[StockSnapshot]:
        with self._uow:
            products = self._uow.products.list_all()
        return [StockSnapshot.of(p) for p in products]
