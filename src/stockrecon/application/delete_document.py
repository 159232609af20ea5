"""Application service: Delete Document use case.

Only drafts can be deleted; anything further along must be cancelled
first.  A draft still holding stock (drafts consume on creation) gives
it back before the record is removed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from stockrecon.application.dto import LedgerLineDTO, ledger_line
from stockrecon.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from stockrecon.domain.exceptions import EntityNotFoundError
from stockrecon.domain.model.document import DeliveryChallan, Invoice
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.reconciliation_engine import Delete, ReconciliationEngine


class _DeleteDocumentHandler(ABC):

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

    def handle(self, number: str, performed_by: str = "system") -> list[LedgerLineDTO]:
        """Delete the document and return the restoring ledger lines, if any."""
        return retry_on_conflict(lambda: self._attempt(number, performed_by), self._attempts)

    def _attempt(self, number, performed_by) -> list[LedgerLineDTO]:
        with self._uow_factory() as uow:
            document = self._load(uow, number)
            if document is None:
                raise EntityNotFoundError(f"{self._label} {number} not found")

            document.assert_deletable()
            report = self._engine.reconcile(uow, document, Delete(), performed_by)
            uow.documents.delete(document)
            uow.commit()
        return [ledger_line(entry) for entry in report.entries]


class DeleteChallanHandler(_DeleteDocumentHandler):

    _label = "Delivery challan"

    def _load(self, uow: UnitOfWork, number: str) -> DeliveryChallan | None:
        return uow.documents.get_challan(number)


class DeleteInvoiceHandler(_DeleteDocumentHandler):

    _label = "Invoice"

    def _load(self, uow: UnitOfWork, number: str) -> Invoice | None:
        return uow.documents.get_invoice(number)
