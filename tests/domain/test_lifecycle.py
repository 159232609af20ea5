"""Unit tests for the document status machine."""

import pytest

from stockrecon.domain.exceptions import InvalidTransitionError, ValidationError
from stockrecon.domain.model.lifecycle import (
    DocumentStatus,
    StockEffect,
    parse_status,
    stock_effect,
)

S = DocumentStatus


class TestStockEffect:

    @pytest.mark.parametrize(
        "old, new",
        [(S.DRAFT, S.SENT), (S.DRAFT, S.DELIVERED), (S.SENT, S.DELIVERED), (S.CANCELLED, S.SENT)],
    )
    def test_moving_forward_consumes(self, old, new):
        assert stock_effect(old, new) is StockEffect.CONSUME

    @pytest.mark.parametrize(
        "old, new",
        [(S.SENT, S.DRAFT), (S.DELIVERED, S.DRAFT), (S.SENT, S.CANCELLED), (S.OVERDUE, S.CANCELLED)],
    )
    def test_moving_back_restores(self, old, new):
        assert stock_effect(old, new) is StockEffect.RESTORE

    def test_payment_does_not_touch_stock(self):
        assert stock_effect(S.SENT, S.PAID) is StockEffect.NONE
        assert stock_effect(S.OVERDUE, S.PAID) is StockEffect.NONE

    def test_same_status_is_noop(self):
        for status in DocumentStatus:
            assert stock_effect(status, status) is StockEffect.NONE

    def test_unknown_transition_rejected(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            stock_effect(S.PAID, S.DRAFT)
        assert exc_info.value.from_status == "paid"
        assert exc_info.value.to_status == "draft"


class TestParseStatus:

    def test_parses_case_insensitively(self):
        assert parse_status(" Sent ") is S.SENT

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="Unknown document status"):
            parse_status("shipped")
