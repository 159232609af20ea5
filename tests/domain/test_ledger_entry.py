"""Unit tests for StockLedgerEntry."""

import pytest

from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry, TransactionType
from stockrecon.domain.model.stock import StockKey

KEY = StockKey("BRG-6204", "loc-1", "room-1", "rack-1")


def _movement(delta: int, previous: int) -> StockLedgerEntry:
    return StockLedgerEntry.for_movement(
        KEY,
        delta,
        previous,
        reference_id="DC251019-A-000001",
        reference_type=ReferenceType.DELIVERY_CHALLAN,
        performed_by="alice",
    )


class TestLedgerEntry:

    def test_outward_movement(self):
        entry = _movement(-4, 10)
        assert entry.transaction_type is TransactionType.OUTWARD
        assert entry.quantity == -4
        assert entry.previous_quantity == 10
        assert entry.resulting_quantity == 6
        assert entry.key == KEY

    def test_inward_movement(self):
        entry = _movement(2, 4)
        assert entry.transaction_type is TransactionType.INWARD
        assert entry.resulting_quantity == 6

    def test_zero_movement_rejected(self):
        with pytest.raises(ValidationError, match="non-zero"):
            _movement(0, 5)

    def test_unbalanced_entry_rejected(self):
        with pytest.raises(ValidationError, match="does not balance"):
            StockLedgerEntry(
                product_id="BRG-6204",
                location_id="loc-1",
                transaction_type=TransactionType.OUTWARD,
                quantity=-4,
                previous_quantity=10,
                resulting_quantity=5,
                reference_id="X",
                reference_type=ReferenceType.SALE,
                performed_by="alice",
            )

    def test_reference_required(self):
        with pytest.raises(ValidationError, match="reference id"):
            StockLedgerEntry(
                product_id="BRG-6204",
                location_id="loc-1",
                transaction_type=TransactionType.INWARD,
                quantity=1,
                previous_quantity=0,
                resulting_quantity=1,
                reference_id="",
                reference_type=ReferenceType.SALE,
                performed_by="alice",
            )

    def test_entries_are_immutable(self):
        entry = _movement(-1, 1)
        with pytest.raises(AttributeError):
            entry.quantity = 5
