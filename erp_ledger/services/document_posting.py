"""
Document posting service: posts business documents through
their strategies.

Domain modules register, per source type, a loader (fetches
the document by id) and a strategy (derives the lines). Then
post_document() is all they need to call:

    service = DocumentPostingService(db)
    service.register("sales_doc", load_invoice, SalesDocStrategy())
    result = service.post_document(tenant_id, actor_id, "sales_doc", "INV-1")

The strategy's lines go through the posting engine unchanged,
so idempotency, validation and auditing are the same as for a
direct post.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy.orm import Session

from erp_ledger.exceptions import LedgerError, NotFound
from erp_ledger.schemas.posting import PostingContext, PostingResult
from erp_ledger.services.posting_engine import PostingEngine
from erp_ledger.strategies.base import AccountCodes, AccountResolver, PostingStrategy

logger = logging.getLogger(__name__)

# (tenant_id, source_id) -> document, or None when it does not exist
DocumentLoader = Callable[[uuid.UUID, str], Any]


@dataclass(frozen=True)
class Registration:
    loader: DocumentLoader
    strategy: PostingStrategy


class DocumentPostingService:

    def __init__(
        self,
        db: Session,
        engine: PostingEngine | None = None,
        codes: AccountCodes | None = None,
    ):
        self.db = db
        self.engine = engine or PostingEngine(db)
        self.codes = codes or AccountCodes()
        self._registry: dict[str, Registration] = {}

    def register(
        self, source_type: str, loader: DocumentLoader, strategy: PostingStrategy
    ) -> None:
        if source_type in self._registry:
            raise ValueError(f"Source type '{source_type}' is already registered")
        self._registry[source_type] = Registration(loader, strategy)

    def registered_types(self) -> list[str]:
        return sorted(self._registry)

    def post_document(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        source_type: str,
        source_id: str,
        memo: str | None = None,
    ) -> PostingResult:
        """
        Load a document, derive its lines and post them.

        A missing document or a strategy failure comes back as a
        failed PostingResult, like any other posting failure.
        Raises ValueError for a source type nobody registered.
        """
        registration = self._registry.get(source_type)
        if registration is None:
            raise ValueError(f"No posting strategy registered for '{source_type}'")

        try:
            document = registration.loader(tenant_id, source_id)
            if document is None:
                raise NotFound(f"{source_type} {source_id} not found")

            resolver = AccountResolver(self.db, tenant_id, self.codes)
            proposed = registration.strategy.propose(document, resolver)
        except LedgerError as exc:
            logger.warning(
                "Cannot post %s:%s (%s): %s",
                source_type, source_id, exc.code, exc.message,
            )
            return PostingResult.failed(exc)

        return self.engine.post(
            PostingContext(
                tenant_id=tenant_id,
                actor_id=actor_id,
                source_type=source_type,
                source_id=source_id,
                posting_date=proposed.posting_date,
                memo=memo or proposed.memo,
                lines=proposed.lines,
            )
        )
