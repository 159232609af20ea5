"""Abstract repository for stock-consuming documents."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockrecon.domain.model.document import DeliveryChallan, Invoice
from stockrecon.domain.model.lifecycle import DocumentStatus


class DocumentRepository(ABC):

    @abstractmethod
    def get_challan(self, challan_number: str) -> DeliveryChallan | None:
        """Return a delivery challan by its number, or None."""

    @abstractmethod
    def get_invoice(self, invoice_number: str) -> Invoice | None:
        """Return an invoice by its number, or None."""

    @abstractmethod
    def save(self, document: DeliveryChallan | Invoice) -> None:
        """Persist a new or updated document."""

    @abstractmethod
    def delete(self, document: DeliveryChallan | Invoice) -> None:
        """Remove a document record."""

    @abstractmethod
    def list_challans(self, status: DocumentStatus | None = None) -> list[DeliveryChallan]:
        """Return challans in creation order, optionally filtered by status."""

    @abstractmethod
    def list_invoices(self, status: DocumentStatus | None = None) -> list[Invoice]:
        """Return invoices in creation order, optionally filtered by status."""
