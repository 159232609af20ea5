"""Unit tests for the StockRecord aggregate."""

import pytest

from stockrecon.domain.exceptions import InsufficientStockError, ValidationError
from stockrecon.domain.model.stock import StockKey, StockRecord

KEY = StockKey("BRG-6204", "loc-1", "room-1", "rack-1")


class TestStockRecordInvariants:

    def test_available_is_derived(self):
        record = StockRecord(KEY, quantity=10, reserved_quantity=3)
        assert record.available_quantity == 7
        record.quantity = 12
        assert record.available_quantity == 9

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            StockRecord(KEY, quantity=-1)

    def test_reserved_above_quantity_rejected(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            StockRecord(KEY, quantity=2, reserved_quantity=3)

    def test_key_renders_as_path(self):
        assert str(KEY) == "loc-1/room-1/rack-1"
        assert str(StockKey("P", "loc-1")) == "loc-1"


class TestStockRecordApply:

    def test_apply_returns_previous_quantity(self):
        record = StockRecord(KEY, quantity=10)
        previous = record.apply(-4)
        assert previous == 10
        assert record.quantity == 6

    def test_inward_apply(self):
        record = StockRecord(KEY, quantity=0)
        record.apply(5)
        assert record.quantity == 5

    def test_over_consumption_rejected_not_clamped(self):
        record = StockRecord(KEY, quantity=3)
        with pytest.raises(InsufficientStockError) as exc_info:
            record.apply(-5)
        assert record.quantity == 3
        assert exc_info.value.available == 3
        assert exc_info.value.requested == 5

    def test_cannot_consume_reserved_units(self):
        record = StockRecord(KEY, quantity=10, reserved_quantity=8)
        with pytest.raises(InsufficientStockError):
            record.apply(-3)
        record.apply(-2)
        assert record.quantity == 8
        assert record.available_quantity == 0


class TestStockRecordReservation:

    def test_reserve_reduces_available(self):
        record = StockRecord(KEY, quantity=10)
        record.reserve(4)
        assert record.reserved_quantity == 4
        assert record.available_quantity == 6
        assert record.quantity == 10

    def test_reserve_more_than_available_rejected(self):
        record = StockRecord(KEY, quantity=10, reserved_quantity=8)
        with pytest.raises(InsufficientStockError):
            record.reserve(3)

    def test_reserve_zero_rejected(self):
        record = StockRecord(KEY, quantity=10)
        with pytest.raises(ValidationError, match="must be positive"):
            record.reserve(0)

    def test_release(self):
        record = StockRecord(KEY, quantity=10, reserved_quantity=5)
        record.release(2)
        assert record.reserved_quantity == 3
        assert record.available_quantity == 7

    def test_release_more_than_reserved_rejected(self):
        record = StockRecord(KEY, quantity=10, reserved_quantity=1)
        with pytest.raises(ValidationError, match="only 1 currently reserved"):
            record.release(2)
