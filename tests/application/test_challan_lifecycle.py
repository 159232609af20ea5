"""Integration tests for the delivery challan use cases."""

import re

import pytest

from stockrecon.application.change_status import ChangeChallanStatusHandler, _ChangeStatusHandler
from stockrecon.application.create_challan import CreateChallanHandler
from stockrecon.application.delete_document import DeleteChallanHandler, _DeleteDocumentHandler
from stockrecon.application.dto import AllocationSpec, ItemSpec
from stockrecon.application.list_documents import ListChallansHandler
from stockrecon.application.show_document import ShowChallanHandler
from stockrecon.application.update_challan import UpdateChallanItemsHandler
from stockrecon.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidTransitionError,
    ValidationError,
)
from stockrecon.domain.model.lifecycle import DocumentStatus
from stockrecon.domain.service.reconciliation_engine import ReconciliationEngine
from tests.fakes import FakeUnitOfWork, RacingStockRepository

PRODUCT = "BRG-6204"


def _setup(quantity: int = 10):
    uow = FakeUnitOfWork()
    key = uow.seed(PRODUCT, "Main", quantity, room="R1", rack="A")
    return uow, key, (lambda: uow), ReconciliationEngine()


def _spare(quantity: int, allocated: int | None = None) -> ItemSpec:
    return ItemSpec(
        description="Bearing 6204",
        quantity=quantity,
        product_id=PRODUCT,
        allocations=(AllocationSpec("Main", allocated or quantity, room="R1", rack="A"),),
    )


def _create(factory, engine, *spares, **kwargs):
    return CreateChallanHandler(factory, engine).handle(
        customer="Acme Utilities",
        department="Maintenance",
        destination="Plant 2",
        spares=list(spares),
        **kwargs,
    )


class TestCreateChallan:

    def test_create_draws_stock_and_saves(self):
        uow, key, factory, engine = _setup()

        dto = _create(factory, engine, _spare(4))

        assert re.fullmatch(r"DC\d{6}-A-000001", dto.number)
        assert dto.status == "draft"
        assert dto.stock_consumed is True
        assert [(m.quantity, m.resulting_quantity) for m in dto.movements] == [(-4, 6)]
        assert uow.quantity(key) == 6
        assert uow.documents.get_challan(dto.number).stock_consumed is True

    def test_explicit_number_is_kept(self):
        _, _, factory, engine = _setup()
        dto = _create(factory, engine, _spare(1), challan_number="DC-2024-17")
        assert dto.number == "DC-2024-17"

    def test_duplicate_number_rejected(self):
        _, _, factory, engine = _setup()
        _create(factory, engine, _spare(1), challan_number="DC-7")
        with pytest.raises(ValidationError, match="already exists"):
            _create(factory, engine, _spare(1), challan_number="DC-7")

    def test_services_only_challan_moves_no_stock(self):
        uow, key, factory, engine = _setup()
        dto = CreateChallanHandler(factory, engine).handle(
            customer="Acme Utilities",
            department="Maintenance",
            destination="Plant 2",
            spares=[],
            services=[ItemSpec("Installation", 1)],
        )
        assert dto.movements == []
        assert uow.quantity(key) == 10

    def test_insufficient_stock_leaves_no_trace(self):
        uow, key, factory, engine = _setup(3)

        with pytest.raises(InsufficientStockError):
            _create(factory, engine, _spare(5), challan_number="DC-9")

        assert uow.quantity(key) == 3
        assert uow.ledger.entries == []
        assert uow.documents.get_challan("DC-9") is None

    def test_lost_race_is_retried(self):
        uow, key, factory, engine = _setup()
        uow.stock = RacingStockRepository(uow.stock._store, key, amount=8)

        dto = _create(factory, engine, _spare(4))

        assert uow.stock.raced
        assert uow.quantity(key) == 6
        assert len(dto.movements) == 1


class TestUpdateChallan:

    def test_growing_draws_only_the_difference(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))

        updated = UpdateChallanItemsHandler(factory, engine).handle(dto.number, [_spare(6)])

        assert uow.quantity(key) == 4
        assert [(m.quantity, m.previous_quantity) for m in updated.movements] == [(-2, 6)]

    def test_unchanged_spares_write_nothing(self):
        uow, _, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))

        updated = UpdateChallanItemsHandler(factory, engine).handle(dto.number, [_spare(4)])

        assert updated.movements == []
        assert len(uow.ledger.entries) == 1

    def test_unknown_challan(self):
        _, _, factory, engine = _setup()
        with pytest.raises(EntityNotFoundError):
            UpdateChallanItemsHandler(factory, engine).handle("DC-404", [_spare(1)])


class TestChallanStatus:

    def test_sent_then_delivered_moves_nothing_more(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))
        handler = ChangeChallanStatusHandler(factory, engine)

        handler.handle(dto.number, DocumentStatus.SENT)
        delivered = handler.handle(dto.number, DocumentStatus.DELIVERED)

        assert delivered.status == "delivered"
        assert delivered.movements == []
        assert uow.quantity(key) == 6

    def test_cancel_restores(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))

        cancelled = ChangeChallanStatusHandler(factory, engine).handle(
            dto.number, DocumentStatus.CANCELLED
        )

        assert cancelled.stock_consumed is False
        assert uow.quantity(key) == 10
        assert uow.documents.get_challan(dto.number).status is DocumentStatus.CANCELLED

    def test_challan_cannot_be_paid(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))

        with pytest.raises(InvalidTransitionError):
            ChangeChallanStatusHandler(factory, engine).handle(dto.number, DocumentStatus.PAID)

        assert uow.documents.get_challan(dto.number).status is DocumentStatus.DRAFT


class TestDeleteChallan:

    def test_delete_draft_restores_and_removes(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))

        lines = DeleteChallanHandler(factory, engine).handle(dto.number)

        assert [line.quantity for line in lines] == [4]
        assert uow.quantity(key) == 10
        assert uow.documents.get_challan(dto.number) is None

    def test_sent_challan_must_be_cancelled_first(self):
        uow, key, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))
        ChangeChallanStatusHandler(factory, engine).handle(dto.number, DocumentStatus.SENT)

        with pytest.raises(InvalidTransitionError, match="sent to deleted"):
            DeleteChallanHandler(factory, engine).handle(dto.number)

        assert uow.quantity(key) == 6
        assert uow.documents.get_challan(dto.number) is not None


class TestShowChallan:

    def test_history_covers_every_transition(self):
        _, _, factory, engine = _setup()
        dto = _create(factory, engine, _spare(4))
        UpdateChallanItemsHandler(factory, engine).handle(dto.number, [_spare(6)])
        ChangeChallanStatusHandler(factory, engine).handle(dto.number, DocumentStatus.CANCELLED)

        shown = ShowChallanHandler(factory).handle(dto.number)

        assert [m.quantity for m in shown.movements] == [-4, -2, 6]
        assert shown.status == "cancelled"
        assert shown.items[0].product_id == PRODUCT

    def test_unknown_challan(self):
        _, _, factory, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Delivery challan DC-404 not found"):
            ShowChallanHandler(factory).handle("DC-404")


class TestListChallans:

    def test_lists_in_creation_order(self):
        _, _, factory, engine = _setup()
        _create(factory, engine, _spare(1), challan_number="DC-1")
        _create(factory, engine, _spare(2), challan_number="DC-2")

        listed = ListChallansHandler(factory).handle()

        assert [(d.number, d.kind, d.status) for d in listed] == [
            ("DC-1", "challan", "draft"),
            ("DC-2", "challan", "draft"),
        ]
        assert all(d.movements == [] for d in listed)

    def test_status_filter(self):
        _, _, factory, engine = _setup()
        _create(factory, engine, _spare(1), challan_number="DC-1")
        _create(factory, engine, _spare(2), challan_number="DC-2")
        ChangeChallanStatusHandler(factory, engine).handle("DC-2", DocumentStatus.CANCELLED)

        handler = ListChallansHandler(factory)
        assert [d.number for d in handler.handle(DocumentStatus.CANCELLED)] == ["DC-2"]
        assert handler.handle(DocumentStatus.DELIVERED) == []


class TestHandlerBases:

    @pytest.mark.parametrize("base", [_ChangeStatusHandler, _DeleteDocumentHandler])
    def test_bases_cannot_be_instantiated(self, base):
        _, _, factory, engine = _setup()
        with pytest.raises(TypeError):
            base(factory, engine)
