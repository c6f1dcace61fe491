"""
Ledger store: persistence for journal entries, lines and
posting links.

This is the only code that writes journal rows. It enforces
the rules that must hold for every stored entry:
1. Debits equal credits (within the configured tolerance)
2. Every line references an existing, active account of the tenant
3. Lines are numbered explicitly, starting at 1
4. A posted entry only ever changes once, to REVERSED

The store flushes but never commits. The posting and reversal
engines own the transaction boundary, so an entry, its lines
and its posting link are committed together or not at all.
"""

import uuid
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from erp_ledger.config import get_settings
from erp_ledger.exceptions import (
    AlreadyReversed,
    ImbalancedEntry,
    InactiveAccount,
    NotFound,
    NotPosted,
    UnknownAccount,
)
from erp_ledger.models.account import Account
from erp_ledger.models.enums import EntryStatus
from erp_ledger.models.journal_entry import JournalEntry
from erp_ledger.models.journal_line import JournalLine
from erp_ledger.models.posting_link import PostingLink
from erp_ledger.schemas.posting import EntryHeader, PostingLine


def line_totals(lines) -> tuple[Decimal, Decimal]:
    """Sum debits and credits of any objects with .debit/.credit."""
    total_debit = sum((Decimal(line.debit) for line in lines), Decimal("0"))
    total_credit = sum((Decimal(line.credit) for line in lines), Decimal("0"))
    return total_debit, total_credit


class LedgerStore:
    """
    Journal persistence.

    Takes a session; the caller controls commit and rollback.
    """

    def __init__(self, db: Session, tolerance: Decimal | None = None):
        self.db = db
        self.tolerance = (
            tolerance if tolerance is not None
            else get_settings().BALANCE_TOLERANCE
        )

    # --- Accounts (read-only from the ledger's point of view) ---

    def get_accounts(
        self, tenant_id: uuid.UUID, account_ids
    ) -> dict[uuid.UUID, Account]:
        """Return the tenant's accounts among account_ids, keyed by id."""
        ids = set(account_ids)
        if not ids:
            return {}
        accounts = self.db.execute(
            select(Account).where(
                Account.tenant_id == tenant_id,
                Account.id.in_(ids),
            )
        ).scalars().all()
        return {a.id: a for a in accounts}

    # --- Entries ---

    def insert_entry_with_lines(
        self,
        tenant_id: uuid.UUID,
        header: EntryHeader,
        lines: list[PostingLine],
    ) -> JournalEntry:
        """
        Write an entry and all of its lines, ending in POSTED.

        Every check runs before anything is added to the session,
        so a rejected entry leaves no pending rows behind.

        Raises:
            ImbalancedEntry: debits and credits differ by more than
                the tolerance.
            UnknownAccount: a line references an account that does
                not exist for this tenant.
            InactiveAccount: a line references a deactivated account.
        """
        total_debit, total_credit = line_totals(lines)
        if abs(total_debit - total_credit) > self.tolerance:
            raise ImbalancedEntry(
                f"Entry does not balance: "
                f"debits={total_debit}, credits={total_credit}"
            )

        accounts = self.get_accounts(tenant_id, (l.account_id for l in lines))
        for line_no, line in enumerate(lines, start=1):
            account = accounts.get(line.account_id)
            if account is None:
                raise UnknownAccount(
                    f"Line {line_no}: account {line.account_id} not found"
                )
            if not account.is_active:
                raise InactiveAccount(
                    f"Line {line_no}: account {account.code} is not active"
                )

        entry = JournalEntry(
            tenant_id=tenant_id,
            posting_date=header.posting_date,
            memo=header.memo,
            status=EntryStatus.DRAFT,
            source_type=header.source_type,
            source_id=header.source_id,
            posted_by_actor_id=header.posted_by_actor_id,
        )
        for line_no, line in enumerate(lines, start=1):
            entry.lines.append(JournalLine(
                tenant_id=tenant_id,
                line_no=line_no,
                account_id=line.account_id,
                debit=line.debit,
                credit=line.credit,
                description=line.description,
            ))
        self.db.add(entry)
        self.db.flush()

        # Draft never survives the transaction
        entry.status = EntryStatus.POSTED
        self.db.flush()
        return entry

    def get_entry(
        self, tenant_id: uuid.UUID, entry_id: uuid.UUID
    ) -> JournalEntry | None:
        return self.db.execute(
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(
                JournalEntry.id == entry_id,
                JournalEntry.tenant_id == tenant_id,
            )
        ).scalar_one_or_none()

    def list_lines_for_entry(self, entry_id: uuid.UUID) -> list[JournalLine]:
        """Return an entry's lines in line-number order."""
        lines = self.db.execute(
            select(JournalLine)
            .where(JournalLine.journal_entry_id == entry_id)
            .order_by(JournalLine.line_no)
        ).scalars().all()
        return list(lines)

    def list_entries(
        self,
        tenant_id: uuid.UUID,
        source_type: str | None = None,
        source_id: str | None = None,
        status: EntryStatus | None = None,
        limit: int = 100,
    ) -> list[JournalEntry]:
        """Return the tenant's entries, newest posting date first."""
        query = (
            select(JournalEntry)
            .options(selectinload(JournalEntry.lines))
            .where(JournalEntry.tenant_id == tenant_id)
        )
        if source_type is not None:
            query = query.where(JournalEntry.source_type == source_type)
        if source_id is not None:
            query = query.where(JournalEntry.source_id == source_id)
        if status is not None:
            query = query.where(JournalEntry.status == status)
        query = query.order_by(
            JournalEntry.posting_date.desc(), JournalEntry.created_at.desc()
        ).limit(limit)
        return list(self.db.execute(query).scalars().all())

    def mark_reversed(
        self,
        tenant_id: uuid.UUID,
        entry_id: uuid.UUID,
        reversal_entry_id: uuid.UUID,
    ) -> None:
        """
        Flip a POSTED entry to REVERSED and point it at its reversal.

        The UPDATE only matches rows still in POSTED, so two
        concurrent reversals cannot both succeed.
        """
        result = self.db.execute(
            update(JournalEntry)
            .where(
                JournalEntry.id == entry_id,
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.status == EntryStatus.POSTED,
            )
            .values(
                status=EntryStatus.REVERSED,
                reversed_by_id=reversal_entry_id,
            )
        )
        if result.rowcount == 1:
            return

        entry = self.db.execute(
            select(JournalEntry).where(
                JournalEntry.id == entry_id,
                JournalEntry.tenant_id == tenant_id,
            )
        ).scalar_one_or_none()
        if entry is None:
            raise NotFound(f"Journal entry {entry_id} not found")
        if entry.status == EntryStatus.REVERSED:
            raise AlreadyReversed(
                f"Journal entry {entry_id} is already reversed "
                f"by {entry.reversed_by_id}"
            )
        raise NotPosted(
            f"Journal entry {entry_id} is {entry.status.value}, not posted"
        )

    # --- Posting links ---

    def find_active_link(
        self, tenant_id: uuid.UUID, source_type: str, source_id: str
    ) -> PostingLink | None:
        return self.db.execute(
            select(PostingLink).where(
                PostingLink.tenant_id == tenant_id,
                PostingLink.source_type == source_type,
                PostingLink.source_id == source_id,
                PostingLink.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def insert_link(
        self,
        tenant_id: uuid.UUID,
        source_type: str,
        source_id: str,
        journal_entry_id: uuid.UUID,
    ) -> PostingLink:
        """
        Record that a source document produced an entry.

        Raises IntegrityError on flush if an active link for the
        same source already exists.
        """
        link = PostingLink(
            tenant_id=tenant_id,
            source_type=source_type,
            source_id=source_id,
            journal_entry_id=journal_entry_id,
        )
        self.db.add(link)
        self.db.flush()
        return link

    def deactivate_links_for_entry(
        self, tenant_id: uuid.UUID, journal_entry_id: uuid.UUID
    ) -> int:
        """Release the source documents linked to a reversed entry."""
        result = self.db.execute(
            update(PostingLink)
            .where(
                PostingLink.tenant_id == tenant_id,
                PostingLink.journal_entry_id == journal_entry_id,
                PostingLink.is_active.is_(True),
            )
            .values(is_active=False)
        )
        return result.rowcount
