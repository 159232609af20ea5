"""Application service: Update Challan Spares use case.

Replacing the spares list moves only the difference: growing an item
draws the extra units, shrinking it returns them, and unchanged items
write nothing to the ledger.
"""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, ItemSpec, document_dto
from stockrecon.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from stockrecon.domain.exceptions import EntityNotFoundError
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.reconciliation_engine import ReconciliationEngine, Update


class UpdateChallanItemsHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        engine: ReconciliationEngine,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._uow_factory = uow_factory
        self._engine = engine
        self._attempts = attempts

    def handle(
        self,
        challan_number: str,
        spares: list[ItemSpec],
        performed_by: str = "system",
    ) -> DocumentDTO:
        return retry_on_conflict(
            lambda: self._attempt(challan_number, spares, performed_by), self._attempts
        )

    def _attempt(self, challan_number, spares, performed_by) -> DocumentDTO:
        with self._uow_factory() as uow:
            challan = uow.documents.get_challan(challan_number)
            if challan is None:
                raise EntityNotFoundError(f"Delivery challan {challan_number} not found")

            old_items = challan.get_items()
            challan.replace_spares([spec.to_item() for spec in spares])
            report = self._engine.reconcile(
                uow,
                challan,
                Update(old_items=old_items, new_items=challan.get_items()),
                performed_by,
            )
            challan.stock_consumed = report.stock_consumed
            uow.documents.save(challan)
            uow.commit()
        return document_dto(challan, report.entries)
