"""Application service: Change Document Status use case.

The status move is validated by the document and the shared transition
table; the engine then consumes or restores stock as the move requires.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, document_dto
from stockrecon.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from stockrecon.domain.exceptions import EntityNotFoundError
from stockrecon.domain.model.document import DeliveryChallan, Invoice
from stockrecon.domain.model.lifecycle import DocumentStatus
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.reconciliation_engine import (
    ReconciliationEngine,
    StatusChange,
)


class _ChangeStatusHandler(ABC):

    _label = "Document"

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        engine: ReconciliationEngine,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._uow_factory = uow_factory
        self._engine = engine
        self._attempts = attempts

    @abstractmethod
    def _load(self, uow: UnitOfWork, number: str) -> DeliveryChallan | Invoice | None:
        """Fetch the document by number."""

    def handle(
        self,
        number: str,
        new_status: DocumentStatus,
        performed_by: str = "system",
    ) -> DocumentDTO:
        return retry_on_conflict(
            lambda: self._attempt(number, new_status, performed_by), self._attempts
        )

    def _attempt(self, number, new_status, performed_by) -> DocumentDTO:
        with self._uow_factory() as uow:
            document = self._load(uow, number)
            if document is None:
                raise EntityNotFoundError(f"{self._label} {number} not found")

            old_status = document.status
            document.change_status(new_status)
            report = self._engine.reconcile(
                uow, document, StatusChange(old_status, new_status), performed_by
            )
            document.stock_consumed = report.stock_consumed
            uow.documents.save(document)
            uow.commit()
        return document_dto(document, report.entries)


class ChangeChallanStatusHandler(_ChangeStatusHandler):

    _label = "Delivery challan"

    def _load(self, uow: UnitOfWork, number: str) -> DeliveryChallan | None:
        return uow.documents.get_challan(number)


class ChangeInvoiceStatusHandler(_ChangeStatusHandler):

    _label = "Invoice"

    def _load(self, uow: UnitOfWork, number: str) -> Invoice | None:
        return uow.documents.get_invoice(number)
