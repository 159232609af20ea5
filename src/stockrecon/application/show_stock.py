"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import StockLineDTO
from stockrecon.domain.repository.unit_of_work import UnitOfWork


class ShowStockHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: str | None = None) -> list[StockLineDTO]:
        with self._uow_factory() as uow:
            records = (
                uow.stock.list_for_product(product_id)
                if product_id
                else uow.stock.list_all()
            )
            return [
                StockLineDTO(
                    product_id=record.product_id,
                    location=uow.locations.describe(record.key),
                    quantity=record.quantity,
                    reserved=record.reserved_quantity,
                    available=record.available_quantity,
                )
                for record in records
            ]

    def available(self, product_id: str) -> int:
        """Total available units of a product across every bin."""
        with self._uow_factory() as uow:
            return uow.stock.aggregate_available(product_id)
