"""
Reversal engine: undoes a posted journal entry by posting its
exact mirror image.

History is never deleted. A reversal:
1. Loads the original; it must exist and be POSTED
2. Swaps debit and credit on every line (same account, amount
   and line number)
3. Re-checks accounts and the period for the reversal date
   (balance holds by construction)
4. Writes the reversal entry (source "reversal:<original id>")
5. Marks the original REVERSED, pointing at the reversal
6. Releases the original source's posting link
7. Commits steps 4-6 together, then records audit events

Every request is audited before any check runs, so rejected
reversals leave a trail too. If any ledger write fails, none
are kept. Reversing the same entry twice fails with
already_reversed; that retry also records the reversal events
if the first attempt lost them after its commit.
"""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_ledger.exceptions import (
    AlreadyReversed,
    LedgerError,
    NotFound,
    NotPosted,
)
from erp_ledger.models.enums import EntryStatus
from erp_ledger.models.journal_line import JournalLine
from erp_ledger.schemas.posting import (
    EntryHeader,
    PostingLine,
    ResultError,
    ReversalContext,
    ReversalResult,
)
from erp_ledger.services.audit_logger import AuditLogger
from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.period_service import PeriodService
from erp_ledger.services.validation_gate import ValidationGate, error_for

logger = logging.getLogger(__name__)

REVERSAL_SOURCE_TYPE = "reversal"


def mirror_lines(lines: list[JournalLine]) -> list[PostingLine]:
    """Swap debit and credit on every line, keeping order."""
    return [
        PostingLine(
            account_id=line.account_id,
            debit=line.credit,
            credit=line.debit,
            description=(
                f"Reversal: {line.description}" if line.description
                else "Reversal"
            )[:255],
        )
        for line in sorted(lines, key=lambda l: l.line_no)
    ]


class ReversalEngine:

    def __init__(
        self,
        db: Session,
        gate: ValidationGate | None = None,
        audit: AuditLogger | None = None,
    ):
        self.db = db
        self.store = LedgerStore(db)
        self.gate = gate or ValidationGate(db, PeriodService(db))
        self.audit = audit or AuditLogger(db)

    def reverse(self, ctx: ReversalContext) -> ReversalResult:
        """
        Reverse a posted entry. Commits on success.

        Failure codes: not_found, not_posted, already_reversed,
        unknown_account, inactive_account, closed_period.
        """
        self._record_requested(ctx)
        try:
            original = self.store.get_entry(ctx.tenant_id, ctx.original_entry_id)
            if original is None:
                raise NotFound(
                    f"Journal entry {ctx.original_entry_id} not found"
                )
            if original.status == EntryStatus.REVERSED:
                self._ensure_audited(ctx, original)
                raise AlreadyReversed(
                    f"Journal entry {original.id} is already reversed "
                    f"by {original.reversed_by_id}"
                )
            if original.status != EntryStatus.POSTED:
                raise NotPosted(
                    f"Journal entry {original.id} is "
                    f"{original.status.value}, not posted"
                )

            posting_date = ctx.posting_date or date.today()
            lines = mirror_lines(original.lines)
            validation = self.gate.validate(
                ctx.tenant_id, lines, posting_date, check_balance=False
            )
            if not validation.is_valid:
                raise error_for(validation)

            source = (original.source_type, original.source_id)
            try:
                reversal_id = self._write(ctx, original.id, posting_date, lines)
            except IntegrityError:
                # A concurrent reversal of the same entry committed first
                self.db.rollback()
                raise AlreadyReversed(
                    f"Journal entry {ctx.original_entry_id} was reversed "
                    f"concurrently"
                )
        except LedgerError as exc:
            self.db.rollback()
            logger.warning(
                "Reversal of %s rejected (%s): %s",
                ctx.original_entry_id, exc.code, exc.message,
            )
            return ReversalResult(
                success=False,
                original_entry_id=ctx.original_entry_id,
                error=ResultError.from_exception(exc),
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Reversal of %s failed", ctx.original_entry_id)
            raise

        self._record_reversed(ctx, source, reversal_id)
        logger.info(
            "Reversed journal entry %s with %s (%s)",
            ctx.original_entry_id, reversal_id, ctx.reason,
        )
        return ReversalResult(
            success=True,
            original_entry_id=ctx.original_entry_id,
            reversal_entry_id=reversal_id,
        )

    def _write(self, ctx: ReversalContext, original_id, posting_date, lines):
        """New entry, status flip and link release in one transaction."""
        reversal = self.store.insert_entry_with_lines(
            ctx.tenant_id,
            EntryHeader(
                posting_date=posting_date,
                memo=ctx.memo or f"Reversal of {original_id}: {ctx.reason}",
                source_type=REVERSAL_SOURCE_TYPE,
                source_id=str(original_id),
                posted_by_actor_id=ctx.actor_id,
            ),
            lines,
        )
        reversal_id = reversal.id
        self.store.insert_link(
            ctx.tenant_id, REVERSAL_SOURCE_TYPE, str(original_id), reversal_id
        )
        self.store.mark_reversed(ctx.tenant_id, original_id, reversal_id)
        self.store.deactivate_links_for_entry(ctx.tenant_id, original_id)
        self.db.commit()
        return reversal_id

    def _record_reversed(self, ctx: ReversalContext, source, reversal_id) -> None:
        source_type, source_id = source
        details = {
            "original_entry_id": ctx.original_entry_id,
            "reversal_entry_id": reversal_id,
            "reason": ctx.reason,
            "source_type": source_type,
            "source_id": source_id,
        }
        try:
            self.audit.record(
                ctx.tenant_id, ctx.actor_id,
                entity_type="journal_entry",
                entity_id=ctx.original_entry_id,
                action="journal_entry_reversed",
                details=details,
            )
            self.audit.record(
                ctx.tenant_id, ctx.actor_id,
                entity_type=source_type,
                entity_id=source_id,
                action=f"{source_type}_reversed",
                details=details,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Reversal %s committed but its audit events failed",
                reversal_id,
            )
            raise

    def _record_requested(self, ctx: ReversalContext) -> None:
        try:
            self.audit.record(
                ctx.tenant_id, ctx.actor_id,
                entity_type="journal_entry",
                entity_id=ctx.original_entry_id,
                action="journal_reversal_requested",
                details={"reason": ctx.reason},
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Could not record reversal request for %s", ctx.original_entry_id
            )
            raise

    def _ensure_audited(self, ctx: ReversalContext, original) -> None:
        """Record the events of a committed reversal that has none."""
        recorded = self.audit.list_events(
            ctx.tenant_id,
            entity_type="journal_entry",
            entity_id=original.id,
            action="journal_entry_reversed",
            limit=1,
        )
        if recorded or original.reversed_by_id is None:
            return
        logger.warning(
            "Reversal %s of %s has no audit events; recording them now",
            original.reversed_by_id, original.id,
        )
        self._record_reversed(
            ctx, (original.source_type, original.source_id), original.reversed_by_id
        )
