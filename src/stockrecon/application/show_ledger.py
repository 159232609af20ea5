"""Application service: Show Ledger use case (query)."""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import LedgerLineDTO, ledger_line
from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.stock_ledger import StockLedger


class ShowLedgerHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        reference_id: str | None = None,
        product_id: str | None = None,
    ) -> list[LedgerLineDTO]:
        """Entries for a reference, a product, or both, oldest first."""
        if not reference_id and not product_id:
            raise ValidationError("Give a reference or a product to show ledger entries for")

        with self._uow_factory() as uow:
            ledger = StockLedger(uow.ledger)
            if reference_id:
                entries = ledger.find_by_reference(reference_id)
                if product_id:
                    entries = [e for e in entries if e.product_id == product_id]
            else:
                entries = ledger.find_by_product(product_id)
            return [ledger_line(e, uow.locations.describe(e.key)) for e in entries]
