"""Application service: List Orders use case (query).

Page content and totals are read in the same unit of work with the same
filter, so ``total_items`` and ``total_pages`` always describe the data
the page was cut from.
"""

from __future__ import annotations

import math

from storefront.application.dto import OrderPageDTO, order_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.repository.order_repository import ORDER_SORT_FIELDS
from storefront.domain.repository.unit_of_work import UnitOfWork


class ListOrdersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        page_number: int,
        page_size: int,
        sort_by: str = "id",
        user_id: int | None = None,
    ) -> OrderPageDTO:
        """Return one zero-based page of orders.

        Args:
            page_number: Zero-based page index.
            page_size: Maximum number of orders per page.
            sort_by: One of ``ORDER_SORT_FIELDS``; ties break on id.
            user_id: If given, only that user's orders are listed and counted.
        """
        if page_number < 0:
            raise ValidationError("Page number cannot be negative")
        if page_size <= 0:
            raise ValidationError("Page size must be positive")
        if sort_by not in ORDER_SORT_FIELDS:
            raise ValidationError(
                f"Cannot sort orders by {sort_by!r} "
                f"(expected one of {', '.join(ORDER_SORT_FIELDS)})"
            )

        with self._uow:
            orders, total = self._uow.orders.list_page(
                offset=page_number * page_size,
                limit=page_size,
                sort_by=sort_by,
                user_id=user_id,
            )

        return OrderPageDTO(
            orders=[order_to_dto(o) for o in orders],
            page_number=page_number,
            page_size=page_size,
            total_items=total,
            total_pages=math.ceil(total / page_size),
        )
