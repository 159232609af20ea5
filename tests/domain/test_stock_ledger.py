"""Unit tests for the StockLedger domain service."""

from stockrecon.domain.model.ledger import ReferenceType, StockLedgerEntry, TransactionType
from stockrecon.domain.model.stock import StockKey
from stockrecon.domain.service.stock_ledger import StockLedger
from tests.fakes import FakeLedgerRepository

BIN_A = StockKey("BRG-6204", "loc-1", "room-1", "rack-1")
BIN_B = StockKey("BRG-6204", "loc-1", "room-1", "rack-2")
CHALLAN = ReferenceType.DELIVERY_CHALLAN


def _move(
    ledger: StockLedger,
    key: StockKey,
    delta: int,
    previous: int,
    ref: str = "DC-1",
    ref_type: ReferenceType = CHALLAN,
) -> None:
    ledger.append(
        StockLedgerEntry.for_movement(
            key, delta, previous,
            reference_id=ref,
            reference_type=ref_type,
            performed_by="alice",
        )
    )


class TestConsumedByReference:

    def test_nets_outward_against_inward_per_bin(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -4, 10)
        _move(ledger, BIN_B, -2, 5)
        _move(ledger, BIN_A, 1, 6)

        assert ledger.consumed_by_reference("DC-1", CHALLAN) == {
            "BRG-6204": {BIN_A: 3, BIN_B: 2}
        }

    def test_fully_returned_bins_are_dropped(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -4, 10)
        _move(ledger, BIN_A, 4, 6)

        assert ledger.consumed_by_reference("DC-1", CHALLAN) == {}

    def test_other_references_and_reservations_ignored(self):
        repo = FakeLedgerRepository()
        ledger = StockLedger(repo)
        _move(ledger, BIN_A, -4, 10, ref="DC-2")
        repo.append(
            StockLedgerEntry(
                product_id="BRG-6204",
                location_id="loc-1",
                transaction_type=TransactionType.RESERVATION,
                quantity=2,
                previous_quantity=0,
                resulting_quantity=2,
                reference_id="DC-1",
                reference_type=ReferenceType.RESERVATION,
                performed_by="alice",
            )
        )

        assert ledger.consumed_by_reference("DC-1", CHALLAN) == {}

    def test_same_number_of_another_kind_not_counted(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -4, 10, ref="X-1")
        _move(ledger, BIN_A, -3, 6, ref="X-1", ref_type=ReferenceType.SALE)

        assert ledger.consumed_by_reference("X-1", CHALLAN) == {"BRG-6204": {BIN_A: 4}}
        assert ledger.consumed_by_reference("X-1", ReferenceType.SALE) == {
            "BRG-6204": {BIN_A: 3}
        }

    def test_transfer_rows_under_same_number_not_counted(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -5, 10, ref="TF-1", ref_type=ReferenceType.TRANSFER)
        _move(ledger, BIN_B, 5, 0, ref="TF-1", ref_type=ReferenceType.TRANSFER)

        assert ledger.consumed_by_reference("TF-1", CHALLAN) == {}
        assert ledger.reference_types("TF-1") == {ReferenceType.TRANSFER}


class TestQueries:

    def test_entries_come_back_in_order_with_ids(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -4, 10)
        _move(ledger, BIN_A, -2, 6)

        entries = ledger.find_by_reference("DC-1")
        assert [e.quantity for e in entries] == [-4, -2]
        assert [e.id for e in entries] == [1, 2]

    def test_product_history_spans_references(self):
        ledger = StockLedger(FakeLedgerRepository())
        _move(ledger, BIN_A, -4, 10, ref="DC-1")
        _move(ledger, StockKey("SEAL-22", "loc-1"), -1, 3, ref="DC-1")
        _move(ledger, BIN_B, -2, 5, ref="IN-1", ref_type=ReferenceType.SALE)

        entries = ledger.find_by_product("BRG-6204")
        assert [(e.reference_id, e.quantity) for e in entries] == [("DC-1", -4), ("IN-1", -2)]
