"""
Posting engine: turns a source document's lines into exactly
one posted journal entry.

Each post:
1. Checks for an active posting link for the source (idempotency)
2. Runs the validation gate; any violation fails the post
3. Writes the entry, its lines and the posting link
4. Commits all three together
5. Records audit events
6. Returns a PostingResult

Posting the same (tenant, source_type, source_id) again with the
same lines returns the first entry with idempotent=True. If two
posts race, the partial unique index on posting_links rejects
the second writer; the engine rolls back and answers from the
link the winner committed.

Failures come back as PostingResult(success=False, error=...).
Nothing is retried here: re-invoking post() is always safe. A
replay also records any audit events a failed audit write lost.
"""

import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from erp_ledger.exceptions import InvalidEntry, LedgerError, SourceAlreadyPosted
from erp_ledger.models.enums import EntryStatus
from erp_ledger.models.journal_entry import JournalEntry
from erp_ledger.schemas.posting import (
    EntryHeader,
    PostingContext,
    PostingLine,
    PostingResult,
)
from erp_ledger.services.audit_logger import AuditLogger
from erp_ledger.services.ledger_store import LedgerStore, line_totals
from erp_ledger.services.period_service import PeriodService
from erp_ledger.services.reversal_engine import REVERSAL_SOURCE_TYPE
from erp_ledger.services.validation_gate import ValidationGate, error_for

logger = logging.getLogger(__name__)

QUANTUM = Decimal("0.000001")


def _line_key(account_id, debit, credit) -> tuple:
    return (
        account_id,
        Decimal(debit).quantize(QUANTUM),
        Decimal(credit).quantize(QUANTUM),
    )


def same_lines(entry: JournalEntry, lines: list[PostingLine]) -> bool:
    """True if the entry's lines match the request, in order."""
    stored = [_line_key(l.account_id, l.debit, l.credit) for l in entry.lines]
    requested = [_line_key(l.account_id, l.debit, l.credit) for l in lines]
    return stored == requested


class PostingEngine:

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

    def post(self, ctx: PostingContext) -> PostingResult:
        """
        Post a source document's lines. Commits on success.

        Failure codes: imbalanced_entry, invalid_entry,
        unknown_account, inactive_account, closed_period,
        source_already_posted.
        """
        try:
            if ctx.source_type == REVERSAL_SOURCE_TYPE:
                raise InvalidEntry(
                    f"Source type '{REVERSAL_SOURCE_TYPE}' is reserved for "
                    f"the reversal engine"
                )

            replay = self._replay(ctx)
            if replay is not None:
                self._ensure_audited(ctx, replay.journal_entry_id)
                return replay

            validation = self.gate.validate(
                ctx.tenant_id, ctx.lines, ctx.posting_date
            )
            if not validation.is_valid:
                raise error_for(validation)

            try:
                entry_id = self._write(ctx)
            except IntegrityError:
                # Another post of this source committed first
                self.db.rollback()
                replay = self._replay(ctx)
                if replay is None:
                    raise
                logger.info(
                    "Concurrent post of %s:%s resolved to entry %s",
                    ctx.source_type, ctx.source_id, replay.journal_entry_id,
                )
                return replay
        except LedgerError as exc:
            self.db.rollback()
            logger.warning(
                "Posting %s:%s rejected (%s): %s",
                ctx.source_type, ctx.source_id, exc.code, exc.message,
            )
            return PostingResult.failed(exc)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Posting %s:%s failed", ctx.source_type, ctx.source_id
            )
            raise

        self._record_posted(ctx, entry_id, validation.warnings)
        logger.info(
            "Posted %s:%s as journal entry %s (%d lines)",
            ctx.source_type, ctx.source_id, entry_id, len(ctx.lines),
        )
        return PostingResult(
            success=True,
            journal_entry_id=entry_id,
            idempotent=False,
            line_count=len(ctx.lines),
            warnings=validation.warnings,
        )

    def _replay(self, ctx: PostingContext) -> PostingResult | None:
        """Answer from an existing posting of the same source, if any."""
        link = self.store.find_active_link(
            ctx.tenant_id, ctx.source_type, ctx.source_id
        )
        if link is None:
            return None

        entry = self.store.get_entry(ctx.tenant_id, link.journal_entry_id)
        if entry is None or entry.status != EntryStatus.POSTED:
            status = entry.status.value if entry else "missing"
            raise SourceAlreadyPosted(
                f"{ctx.source_type}:{ctx.source_id} is linked to journal "
                f"entry {link.journal_entry_id} ({status})"
            )
        if not same_lines(entry, ctx.lines):
            raise SourceAlreadyPosted(
                f"{ctx.source_type}:{ctx.source_id} was already posted as "
                f"journal entry {entry.id} with different lines"
            )

        logger.info(
            "Idempotent replay of %s:%s -> journal entry %s",
            ctx.source_type, ctx.source_id, entry.id,
        )
        return PostingResult(
            success=True,
            journal_entry_id=entry.id,
            idempotent=True,
            line_count=len(entry.lines),
        )

    def _ensure_audited(self, ctx: PostingContext, entry_id) -> None:
        """
        Record the posting events of a replayed entry if they are
        missing, which happens when the audit write failed after
        the ledger commit.
        """
        recorded = self.audit.list_events(
            ctx.tenant_id,
            entity_type="journal_entry",
            entity_id=entry_id,
            action="journal_entry_posted",
            limit=1,
        )
        if recorded:
            return
        logger.warning(
            "Journal entry %s has no posting audit events; recording them now",
            entry_id,
        )
        self._record_posted(ctx, entry_id, [])

    def _write(self, ctx: PostingContext):
        """Entry, lines and link in one transaction."""
        entry = self.store.insert_entry_with_lines(
            ctx.tenant_id,
            EntryHeader(
                posting_date=ctx.posting_date,
                memo=ctx.memo,
                source_type=ctx.source_type,
                source_id=ctx.source_id,
                posted_by_actor_id=ctx.actor_id,
            ),
            ctx.lines,
        )
        entry_id = entry.id
        self.store.insert_link(
            ctx.tenant_id, ctx.source_type, ctx.source_id, entry_id
        )
        self.db.commit()
        return entry_id

    def _record_posted(
        self, ctx: PostingContext, entry_id, warnings: list[str]
    ) -> None:
        total_debit, total_credit = line_totals(ctx.lines)
        try:
            self.audit.record(
                ctx.tenant_id, ctx.actor_id,
                entity_type="journal_entry",
                entity_id=entry_id,
                action="journal_entry_posted",
                details={
                    "source_type": ctx.source_type,
                    "source_id": ctx.source_id,
                    "posting_date": ctx.posting_date,
                    "line_count": len(ctx.lines),
                    "total_debit": total_debit,
                    "total_credit": total_credit,
                },
            )
            self.audit.record(
                ctx.tenant_id, ctx.actor_id,
                entity_type=ctx.source_type,
                entity_id=ctx.source_id,
                action=f"{ctx.source_type}_posted",
                details={"journal_entry_id": entry_id},
            )
            if warnings:
                self.audit.record(
                    ctx.tenant_id, ctx.actor_id,
                    entity_type="journal_entry",
                    entity_id=entry_id,
                    action="soft_closed_period_posting",
                    details={
                        "posting_date": ctx.posting_date,
                        "warnings": warnings,
                    },
                )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Journal entry %s committed but its audit events failed",
                entry_id,
            )
            raise
