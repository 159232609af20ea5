"""Application service: List Documents use cases (queries)."""

from __future__ import annotations

from collections.abc import Callable

from stockrecon.application.dto import DocumentDTO, document_dto
from stockrecon.domain.model.lifecycle import DocumentStatus
from stockrecon.domain.repository.unit_of_work import UnitOfWork


class ListChallansHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, status: DocumentStatus | None = None) -> list[DocumentDTO]:
        """Challans oldest first, optionally only those in ``status``."""
        with self._uow_factory() as uow:
            return [document_dto(c) for c in uow.documents.list_challans(status)]


class ListInvoicesHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, status: DocumentStatus | None = None) -> list[DocumentDTO]:
        with self._uow_factory() as uow:
            return [document_dto(i) for i in uow.documents.list_invoices(status)]
