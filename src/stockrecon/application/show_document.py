"""Application service: Show Document use cases (queries)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, document_dto
from stockrecon.domain.exceptions import EntityNotFoundError
from stockrecon.domain.model.document import DeliveryChallan, Invoice
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.stock_ledger import StockLedger


class _ShowDocumentHandler(ABC):

    _label = "Document"

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @abstractmethod
    def _load(self, uow: UnitOfWork, number: str) -> DeliveryChallan | Invoice | None:
        """Fetch the document by number."""

    def handle(self, number: str) -> DocumentDTO:
        """The document with its full stock history as ``movements``."""
        with self._uow_factory() as uow:
            document = self._load(uow, number)
            if document is None:
                raise EntityNotFoundError(f"{self._label} {number} not found")
            entries = StockLedger(uow.ledger).find_by_reference(
                number, document.get_reference_type()
            )
            return document_dto(document, entries)


class ShowChallanHandler(_ShowDocumentHandler):

    _label = "Delivery challan"

    def _load(self, uow: UnitOfWork, number: str) -> DeliveryChallan | None:
        return uow.documents.get_challan(number)


class ShowInvoiceHandler(_ShowDocumentHandler):

    _label = "Invoice"

    def _load(self, uow: UnitOfWork, number: str) -> Invoice | None:
        return uow.documents.get_invoice(number)
