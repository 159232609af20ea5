"""Application service: Create Delivery Challan use case.

Builds the challan, lets the reconciliation engine draw its spares from
stock, and saves the challan in the same unit of work.  A challan is
never stored without its stock, and stock is never drawn without a
challan.
"""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, ItemSpec, document_dto
from stockrecon.application.retry import DEFAULT_ATTEMPTS, retry_on_conflict
from stockrecon.domain.exceptions import ValidationError
from stockrecon.domain.model.document import DeliveryChallan
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.reconciliation_engine import Create, ReconciliationEngine
from stockrecon.domain.service.reference_numbers import ReferenceNumberGenerator
from stockrecon.domain.service.stock_ledger import StockLedger


class CreateChallanHandler:

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
        department: str,
        destination: str,
        spares: list[ItemSpec],
        services: list[ItemSpec] | None = None,
        challan_number: str | None = None,
        dispatched_through: str = "",
        notes: str | None = None,
        performed_by: str = "system",
    ) -> DocumentDTO:
        return retry_on_conflict(
            lambda: self._attempt(
                customer, department, destination, spares, services or [],
                challan_number, dispatched_through, notes, performed_by,
            ),
            self._attempts,
        )

    def _attempt(
        self, customer, department, destination, spares, services,
        challan_number, dispatched_through, notes, performed_by,
    ) -> DocumentDTO:
        with self._uow_factory() as uow:
            number = challan_number or ReferenceNumberGenerator(uow.counters).next(
                "delivery_challan"
            )
            if uow.documents.get_challan(number) is not None:
                raise ValidationError(f"Delivery challan {number} already exists")
            StockLedger(uow.ledger).check_document_number(number)

            challan = DeliveryChallan.create(
                challan_number=number,
                customer=customer,
                department=department,
                destination=destination,
                spares=[spec.to_item() for spec in spares],
                services=[spec.to_item() for spec in services],
                dispatched_through=dispatched_through,
                notes=notes,
                created_by=performed_by,
            )
            report = self._engine.reconcile(uow, challan, Create(), performed_by)
            challan.stock_consumed = report.stock_consumed
            uow.documents.save(challan)
            uow.commit()
        return document_dto(challan, report.entries)
