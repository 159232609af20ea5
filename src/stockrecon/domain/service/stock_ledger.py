"""Domain service: Stock Ledger.

Thin policy layer over the ledger repository: it refuses entries that do
not balance and derives, from a document's own entries, how much stock
that document currently holds in each bin.
"""

from __future__ import annotations

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry, TransactionType
from stockrecon.domain.model.stock import StockKey
from stockrecon.domain.repository.ledger_repository import LedgerRepository

_MOVEMENTS = (TransactionType.INWARD, TransactionType.OUTWARD)
_DOCUMENT_TYPES = frozenset({ReferenceType.DELIVERY_CHALLAN, ReferenceType.SALE})


class StockLedger:

    def __init__(self, ledger_repo: LedgerRepository) -> None:
        self._ledger_repo = ledger_repo

    def append(self, entry: StockLedgerEntry) -> int:
        """Write one entry and return its id."""
        if entry.resulting_quantity != entry.previous_quantity + entry.quantity:
            raise ValidationError(
                f"Ledger entry for {entry.reference_id} does not balance"
            )
        return self._ledger_repo.append(entry)

    def find_by_reference(
        self,
        reference_id: str,
        reference_type: ReferenceType | None = None,
    ) -> list[StockLedgerEntry]:
        return self._ledger_repo.find_by_reference(reference_id, reference_type)

    def find_by_product(self, product_id: str) -> list[StockLedgerEntry]:
        return self._ledger_repo.find_by_product(product_id)

    def reference_types(self, reference_id: str) -> set[ReferenceType]:
        """Every reference type already recorded under ``reference_id``."""
        return {e.reference_type for e in self._ledger_repo.find_by_reference(reference_id)}

    def check_document_number(self, reference_id: str) -> None:
        """Refuse a document number already issued to a stock operation.

        A challan and an invoice may share a number, since document
        lookups are scoped by reference type.  Adjustment, transfer and
        reservation references are never reused.
        """
        taken = sorted(t.value for t in self.reference_types(reference_id) - _DOCUMENT_TYPES)
        if taken:
            raise ValidationError(
                f"Reference {reference_id} is already used by a {taken[0]} in the ledger"
            )

    def consumed_by_reference(
        self,
        reference_id: str,
        reference_type: ReferenceType,
    ) -> dict[str, dict[StockKey, int]]:
        """Net units each bin has given up to one document, per product.

        Only entries of ``reference_type`` count: numbers are unique per
        kind of document, not across kinds.  Bins appear in the order the
        document first touched them; bins that have been fully given back
        are dropped.
        """
        consumed: dict[str, dict[StockKey, int]] = {}
        for entry in self._ledger_repo.find_by_reference(reference_id, reference_type):
            if entry.transaction_type not in _MOVEMENTS:
                continue
            bins = consumed.setdefault(entry.product_id, {})
            bins[entry.key] = bins.get(entry.key, 0) - entry.quantity

        result: dict[str, dict[StockKey, int]] = {}
        for product_id, bins in consumed.items():
            held = {key: qty for key, qty in bins.items() if qty > 0}
            if held:
                result[product_id] = held
        return result
