"""Abstract repository for the append-only stock ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry


class LedgerRepository(ABC):
    """No update or delete is exposed: entries are immutable once written."""

    @abstractmethod
    def append(self, entry: StockLedgerEntry) -> int:
        """Persist a new entry and return its id."""

    @abstractmethod
    def find_by_reference(
        self,
        reference_id: str,
        reference_type: ReferenceType | None = None,
    ) -> list[StockLedgerEntry]:
        """Return the entries for a reference, in insertion order.

        With ``reference_type`` only entries of that type are returned, so
        a challan and an invoice sharing a number never see each other.
        """

    @abstractmethod
    def find_by_product(self, product_id: str) -> list[StockLedgerEntry]:
        """Return every entry for a product, in insertion order."""
