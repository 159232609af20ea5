"""Unit tests for the DeliveryChallan and Invoice aggregates."""

import pytest

from stockrecon.domain.exceptions import InvalidTransitionError, ValidationError
from stockrecon.domain.model.document import DeliveryChallan, DocumentItem, Invoice
from stockrecon.domain.model.ledger import ReferenceType
from stockrecon.domain.model.lifecycle import DocumentStatus, StockEffect


def _challan(**overrides) -> DeliveryChallan:
    fields = dict(
        challan_number="DC-1",
        customer="Acme Utilities",
        department="Maintenance",
        destination="Plant 2",
        spares=[DocumentItem("Bearing 6204", 4, product_id="BRG-6204")],
    )
    fields.update(overrides)
    return DeliveryChallan.create(**fields)


class TestDeliveryChallanCreate:

    def test_new_challan_is_an_unconsumed_draft(self):
        challan = _challan()
        assert challan.status is DocumentStatus.DRAFT
        assert challan.stock_consumed is False
        assert challan.get_identifier() == "DC-1"
        assert challan.get_reference_type() is ReferenceType.DELIVERY_CHALLAN

    def test_requires_customer(self):
        with pytest.raises(ValidationError, match="Customer is required"):
            _challan(customer="  ")

    def test_requires_some_line(self):
        with pytest.raises(ValidationError, match="At least one spare item or service"):
            _challan(spares=[], services=[])

    def test_rejects_zero_quantity(self):
        with pytest.raises(ValidationError, match="Spare item 1 quantity"):
            _challan(spares=[DocumentItem("Bearing", 0, product_id="BRG-6204")])

    def test_services_do_not_move_stock(self):
        challan = _challan(services=[DocumentItem("Installation", 1)])
        assert [i.product_id for i in challan.get_items()] == ["BRG-6204"]


class TestDeliveryChallanEdits:

    def test_replace_spares_returns_previous(self):
        challan = _challan()
        previous = challan.replace_spares([DocumentItem("Seal", 2, product_id="SEAL-22")])
        assert previous[0].product_id == "BRG-6204"
        assert challan.spares[0].product_id == "SEAL-22"

    def test_cancelled_challan_cannot_be_edited(self):
        challan = _challan()
        challan.change_status(DocumentStatus.CANCELLED)
        with pytest.raises(ValidationError, match="cancelled"):
            challan.replace_spares([])


class TestStatusChanges:

    def test_change_status_reports_effect(self):
        challan = _challan()
        assert challan.change_status(DocumentStatus.SENT) is StockEffect.CONSUME
        assert challan.status is DocumentStatus.SENT

    def test_challan_cannot_be_paid(self):
        challan = _challan()
        with pytest.raises(InvalidTransitionError):
            challan.change_status(DocumentStatus.PAID)
        assert challan.status is DocumentStatus.DRAFT

    def test_only_drafts_are_deletable(self):
        challan = _challan()
        challan.assert_deletable()
        challan.change_status(DocumentStatus.SENT)
        with pytest.raises(InvalidTransitionError, match="sent to deleted"):
            challan.assert_deletable()


class TestInvoice:

    def test_requires_items(self):
        with pytest.raises(ValidationError, match="at least one item"):
            Invoice.create("IN-1", "Acme", items=[])

    def test_no_reduce_stock_means_no_stock_items(self):
        invoice = Invoice.create(
            "IN-1", "Acme", items=[DocumentItem("Bearing", 2, product_id="BRG-6204")],
            reduce_stock=False,
        )
        assert invoice.get_items() == []

    def test_location_is_default_for_unplanned_items(self):
        invoice = Invoice.create(
            "IN-1", "Acme", items=[DocumentItem("Bearing", 2, product_id="BRG-6204")],
            location="Annex",
        )
        assert invoice.default_location() == "Annex"
        assert invoice.get_reference_type() is ReferenceType.SALE

    def test_invoice_cannot_be_delivered(self):
        invoice = Invoice.create("IN-1", "Acme", items=[DocumentItem("Bearing", 2, product_id="BRG-6204")])
        with pytest.raises(InvalidTransitionError):
            invoice.change_status(DocumentStatus.DELIVERED)
