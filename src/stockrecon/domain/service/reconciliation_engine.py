"""Domain service: Reconciliation Engine.

Keeps bin stock and the ledger in line with a document's lifecycle.  For
each transition (create, update, status change, delete) the engine

  Phase 1: computes a signed delta per product and resolves every delta
           to concrete bin movements, checking live stock.  Nothing is
           written; any failure aborts the whole transition.
  Phase 2: applies each movement with an atomic conditional adjust and
           appends the matching ledger entry.

Both phases run inside the caller's unit of work, which commits the
stock, the ledger and the document together.  A bin that passes phase 1
but fails its conditional adjust in phase 2 was changed by someone else
in between; that surfaces as ConcurrentModificationError so the caller
can retry the whole transition.

A document's stock is consumed at most once until explicitly restored.
The document's ``stock_consumed`` flag records which side it is on, and
the report tells the caller what to store next.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Union

from stockrecon.domain.exceptions import (
    ConcurrentModificationError,
    InsufficientStockError,
    InvalidTransitionError,
    ValidationError,
)
from stockrecon.domain.model.document import DocumentItem, StockDocument
from stockrecon.domain.model.ledger import StockLedgerEntry
from stockrecon.domain.model.lifecycle import (
    DELETED,
    DocumentStatus,
    StockEffect,
    stock_effect,
)
from stockrecon.domain.model.stock import StockKey
from stockrecon.domain.model.value_objects import Allocation, AllocationPlan
from stockrecon.domain.repository.unit_of_work import UnitOfWork
from stockrecon.domain.service.allocation_resolver import AllocationResolver
from stockrecon.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationPolicy:
    """Knobs for behaviour that is a business decision, not a rule.

    ``consume_on_create``: draw stock as soon as a document is created,
    even while it is still a draft.
    """

    consume_on_create: bool = True


# --- Transitions --------------------------------------------------------------


@dataclass(frozen=True)
class Create:
    name = "create"


@dataclass(frozen=True)
class Update:
    old_items: list[DocumentItem]
    new_items: list[DocumentItem]
    name = "update"


@dataclass(frozen=True)
class StatusChange:
    old_status: DocumentStatus
    new_status: DocumentStatus
    name = "status_change"


@dataclass(frozen=True)
class Delete:
    name = "delete"


Transition = Union[Create, Update, StatusChange, Delete]


# --- Report -------------------------------------------------------------------


@dataclass
class ProductReconciliation:
    product_id: str
    delta: int
    entries: list[StockLedgerEntry] = field(default_factory=list)
    resulting_levels: dict[StockKey, int] = field(default_factory=dict)


@dataclass
class ReconciliationReport:
    reference_id: str
    reference_type: str
    transition: str
    stock_consumed: bool
    products: list[ProductReconciliation] = field(default_factory=list)

    @property
    def entries(self) -> list[StockLedgerEntry]:
        return [entry for product in self.products for entry in product.entries]

    @property
    def is_noop(self) -> bool:
        return not self.products


@dataclass(frozen=True)
class _Demand:
    """Signed stock change for one product: positive returns stock.

    ``planned`` is how many of the units drawn follow ``plan``; the rest
    come from lines without an allocation.
    """

    product_id: str
    delta: int
    plan: AllocationPlan | None = None
    planned: int = 0
    consumed: dict[StockKey, int] = field(default_factory=dict, compare=False)


def _sum_by_product(items: list[DocumentItem]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for item in items:
        if item.moves_stock:
            totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


def _planned_by_product(items: list[DocumentItem]) -> dict[str, int]:
    totals: dict[str, int] = {}
    for item in items:
        if item.moves_stock and item.allocation is not None:
            totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


def _plans_by_product(items: list[DocumentItem]) -> dict[str, AllocationPlan]:
    plans: dict[str, AllocationPlan] = {}
    for item in items:
        if item.moves_stock and item.allocation is not None:
            current = plans.get(item.product_id)
            plans[item.product_id] = (
                item.allocation if current is None else current.merged_with(item.allocation)
            )
    return plans


class ReconciliationEngine:

    def __init__(self, policy: ReconciliationPolicy | None = None) -> None:
        self._policy = policy or ReconciliationPolicy()

    def reconcile(
        self,
        uow: UnitOfWork,
        document: StockDocument,
        transition: Transition,
        performed_by: str,
    ) -> ReconciliationReport:
        """Apply the stock side of ``transition`` for ``document``.

        Does not commit and does not write the document; the caller does
        both in the same unit of work once this returns.
        """
        ledger = StockLedger(uow.ledger)
        resolver = AllocationResolver(uow.stock, uow.locations)
        reference_id = document.get_identifier()

        demands, consumed_after = self._demands(ledger, document, transition)

        # Phase 1: resolve and validate every product before any write
        resolved: list[tuple[_Demand, list[Allocation]]] = []
        for demand in demands:
            if demand.delta < 0:
                allocations = resolver.consume(
                    demand.product_id,
                    -demand.delta,
                    plan=demand.plan,
                    already_consumed=demand.consumed,
                    default_location=document.default_location(),
                    planned_quantity=demand.planned,
                )
            else:
                allocations = resolver.restore(
                    demand.product_id,
                    demand.delta,
                    plan=demand.plan,
                    already_consumed=demand.consumed,
                    default_location=document.default_location(),
                )
            resolved.append((demand, allocations))

        # Phase 2: apply
        reason = f"{document.get_reference_type().value} {transition.name} - {reference_id}"
        report = ReconciliationReport(
            reference_id=reference_id,
            reference_type=document.get_reference_type().value,
            transition=transition.name,
            stock_consumed=consumed_after,
        )
        for demand, allocations in resolved:
            report.products.append(
                self._apply(uow, ledger, document, demand, allocations, performed_by, reason)
            )

        if report.is_noop:
            logger.debug("%s %s: no stock change", transition.name, reference_id)
        else:
            logger.info(
                "%s %s: %d product(s), %d ledger entr(ies), consumed=%s",
                transition.name,
                reference_id,
                len(report.products),
                len(report.entries),
                consumed_after,
            )
        return report

    # --- Phase 1 helpers ------------------------------------------------------

    def _demands(
        self,
        ledger: StockLedger,
        document: StockDocument,
        transition: Transition,
    ) -> tuple[list[_Demand], bool]:
        """Return the per-product demands and the consumed flag afterwards."""
        consumed = document.stock_consumed

        if isinstance(transition, Create):
            if consumed:
                raise ValidationError(
                    f"Document {document.get_identifier()} has already been reconciled"
                )
            if not self._policy.consume_on_create:
                return [], False
            return self._consume_all(ledger, document), True

        if isinstance(transition, Update):
            if not consumed:
                # Nothing is held; the new items are consumed on the next
                # status change that calls for it.
                return [], False
            return self._update_demands(ledger, document, transition), True

        if isinstance(transition, StatusChange):
            effect = stock_effect(transition.old_status, transition.new_status)
            if effect is StockEffect.CONSUME and not consumed:
                return self._consume_all(ledger, document), True
            if effect is StockEffect.RESTORE and consumed:
                return self._restore_all(ledger, document), False
            return [], consumed

        if isinstance(transition, Delete):
            status = document.get_status()
            if status != DocumentStatus.DRAFT:
                raise InvalidTransitionError(status.value, DELETED)
            if consumed:
                return self._restore_all(ledger, document), False
            return [], False

        raise ValidationError(f"Unknown transition {transition!r}")

    def _consume_all(self, ledger: StockLedger, document: StockDocument) -> list[_Demand]:
        items = document.get_items()
        plans = _plans_by_product(items)
        planned = _planned_by_product(items)
        held = ledger.consumed_by_reference(
            document.get_identifier(), document.get_reference_type()
        )
        return [
            _Demand(
                product_id,
                -qty,
                plans.get(product_id),
                planned.get(product_id, 0),
                held.get(product_id, {}),
            )
            for product_id, qty in _sum_by_product(items).items()
        ]

    def _restore_all(self, ledger: StockLedger, document: StockDocument) -> list[_Demand]:
        plans = _plans_by_product(document.get_items())
        held = ledger.consumed_by_reference(
            document.get_identifier(), document.get_reference_type()
        )
        return [
            _Demand(product_id, sum(bins.values()), plans.get(product_id), consumed=bins)
            for product_id, bins in held.items()
        ]

    def _update_demands(
        self,
        ledger: StockLedger,
        document: StockDocument,
        transition: Update,
    ) -> list[_Demand]:
        old = _sum_by_product(transition.old_items)
        new = _sum_by_product(transition.new_items)
        old_planned = _planned_by_product(transition.old_items)
        new_planned = _planned_by_product(transition.new_items)
        plans = _plans_by_product(transition.new_items)
        held = ledger.consumed_by_reference(
            document.get_identifier(), document.get_reference_type()
        )

        demands: list[_Demand] = []
        for product_id in list(old) + [p for p in new if p not in old]:
            delta = old.get(product_id, 0) - new.get(product_id, 0)
            if delta == 0:
                continue
            # Extra draws follow the plan only as far as planned lines grew.
            grown = new_planned.get(product_id, 0) - old_planned.get(product_id, 0)
            planned = min(-delta, max(0, grown)) if delta < 0 else 0
            demands.append(
                _Demand(
                    product_id,
                    delta,
                    plans.get(product_id),
                    planned,
                    held.get(product_id, {}),
                )
            )
        return demands

    # --- Phase 2 --------------------------------------------------------------

    def _apply(
        self,
        uow: UnitOfWork,
        ledger: StockLedger,
        document: StockDocument,
        demand: _Demand,
        allocations: list[Allocation],
        performed_by: str,
        reason: str,
    ) -> ProductReconciliation:
        result = ProductReconciliation(product_id=demand.product_id, delta=demand.delta)
        for allocation in allocations:
            try:
                previous, record = uow.stock.adjust(allocation.key, allocation.quantity)
            except InsufficientStockError as exc:
                logger.warning(
                    "stock for %s at %s changed during reconciliation of %s",
                    demand.product_id,
                    allocation.key,
                    document.get_identifier(),
                )
                raise ConcurrentModificationError(
                    f"Stock for product '{demand.product_id}' at {allocation.key} "
                    f"changed while {document.get_identifier()} was being reconciled"
                ) from exc

            entry = StockLedgerEntry.for_movement(
                allocation.key,
                allocation.quantity,
                previous,
                reference_id=document.get_identifier(),
                reference_type=document.get_reference_type(),
                performed_by=performed_by,
                reason=reason,
            )
            entry_id = ledger.append(entry)
            result.entries.append(dataclasses.replace(entry, id=entry_id))
            result.resulting_levels[allocation.key] = record.quantity
            logger.debug(
                "%s %+d at %s -> %d", demand.product_id, allocation.quantity,
                allocation.key, record.quantity,
            )
        return result
