"""Application service: Create Invoice use case."""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, ItemSpec, document_dto
from stockrecon.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.document import Invoice
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.reconciliation_engine import Create, ReconciliationEngine
from stockrecon.domain.service.reference_numbers import ReferenceNumberGenerator
from stockrecon.domain.service.stock_ledger import StockLedger


class CreateInvoiceHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        engine: ReconciliationEngine,
        attempts: int = DEFAULT_ATTEMPTS,
    ) -> None:
        self._uow_factory = uow_factory
        self._engine = engine
        self._attempts = attempts

    def handle(
        self,
        customer: str,
        items: list[ItemSpec],
        location: str | None = None,
        reduce_stock: bool = True,
        invoice_number: str | None = None,
        performed_by: str = "system",
    ) -> DocumentDTO:
        return retry_on_conflict(
            lambda: self._attempt(
                customer, items, location, reduce_stock, invoice_number, performed_by
            ),
            self._attempts,
        )

    def _attempt(
        self, customer, items, location, reduce_stock, invoice_number, performed_by
    ) -> DocumentDTO:
        with self._uow_factory() as uow:
            number = invoice_number or ReferenceNumberGenerator(uow.counters).next("invoice")
            if uow.documents.get_invoice(number) is not None:
                raise ValidationError(f"Invoice {number} already exists")
            StockLedger(uow.ledger).check_document_number(number)

            invoice = Invoice.create(
                invoice_number=number,
                customer=customer,
                items=[spec.to_item() for spec in items],
                location=location,
                reduce_stock=reduce_stock,
                created_by=performed_by,
            )
            report = self._engine.reconcile(uow, invoice, Create(), performed_by)
            invoice.stock_consumed = report.stock_consumed
            uow.documents.save(invoice)
            uow.commit()
        return document_dto(invoice, report.entries)
