"""Document status machine and its effect on stock.

Every stock-consuming document moves through the same status machine.
``STATUS_TRANSITIONS`` is the single source of truth for which moves are
legal and what each one does to stock.  Statuses a document type does not
use (a challan is never ``paid``) are filtered by the document itself.
"""

from __future__ import annotations

from enum import Enum

from stockrecon.domain.exceptions import InvalidTransitionError, ValidationError


class DocumentStatus(Enum):
    DRAFT = "draft"
    SENT = "sent"
    DELIVERED = "delivered"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class StockEffect(Enum):
    CONSUME = "consume"  # only if the document's stock is not consumed yet
    RESTORE = "restore"  # only if the document's stock is currently consumed
    NONE = "none"


_S = DocumentStatus

STATUS_TRANSITIONS: dict[tuple[DocumentStatus, DocumentStatus], StockEffect] = {
    (_S.DRAFT, _S.SENT): StockEffect.CONSUME,
    (_S.DRAFT, _S.DELIVERED): StockEffect.CONSUME,
    (_S.DRAFT, _S.CANCELLED): StockEffect.RESTORE,
    (_S.SENT, _S.DELIVERED): StockEffect.CONSUME,
    (_S.SENT, _S.PAID): StockEffect.NONE,
    (_S.SENT, _S.OVERDUE): StockEffect.NONE,
    (_S.SENT, _S.DRAFT): StockEffect.RESTORE,
    (_S.SENT, _S.CANCELLED): StockEffect.RESTORE,
    (_S.DELIVERED, _S.DRAFT): StockEffect.RESTORE,
    (_S.DELIVERED, _S.CANCELLED): StockEffect.RESTORE,
    (_S.OVERDUE, _S.PAID): StockEffect.NONE,
    (_S.OVERDUE, _S.DRAFT): StockEffect.RESTORE,
    (_S.OVERDUE, _S.CANCELLED): StockEffect.RESTORE,
    (_S.CANCELLED, _S.DRAFT): StockEffect.NONE,
    (_S.CANCELLED, _S.SENT): StockEffect.CONSUME,
    (_S.CANCELLED, _S.DELIVERED): StockEffect.CONSUME,
}

DELETED = "deleted"


def stock_effect(old: DocumentStatus, new: DocumentStatus) -> StockEffect:
    """Return the stock effect of moving from ``old`` to ``new``.

    Staying in the same status is always allowed and does nothing.
    """
    if old == new:
        return StockEffect.NONE
    try:
        return STATUS_TRANSITIONS[(old, new)]
    except KeyError:
        raise InvalidTransitionError(old.value, new.value) from None


def parse_status(raw: str) -> DocumentStatus:
    try:
        return DocumentStatus(raw.strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown document status '{raw}'") from None
