"""
Balance calculator: signed account balances derived from the
journal.

Balances are never stored. They are always summed from journal
lines, so a balance is correct as long as the lines are. There
is no cache: every call reads what the ledger currently holds.

Both posted and reversed entries count. A reversed entry and its
reversal are both on the books and net to zero together.

Sign convention:
    asset, expense           balance = debits - credits
    liability, equity, income balance = credits - debits
    contra types             the opposite of the type they offset
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from erp_ledger.config import get_settings
from erp_ledger.exceptions import NotFound
from erp_ledger.models.account import Account
from erp_ledger.models.enums import AccountType, EntryStatus, EntryType
from erp_ledger.models.journal_entry import JournalEntry
from erp_ledger.models.journal_line import JournalLine

QUANTUM = Decimal("0.000001")

# Entries that are part of the books; drafts never are
_BOOKED = (EntryStatus.POSTED, EntryStatus.REVERSED)


def _dec(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(QUANTUM)


def signed_balance(
    account_type: AccountType, debits: Decimal, credits: Decimal
) -> Decimal:
    """Apply the account type's natural side to raw totals."""
    if account_type.normal_side == EntryType.DEBIT:
        return debits - credits
    return credits - debits


class BalanceCalculator:

    def __init__(self, db: Session, tolerance: Decimal | None = None):
        self.db = db
        self.tolerance = (
            tolerance if tolerance is not None
            else get_settings().BALANCE_TOLERANCE
        )

    def _totals_query(self, tenant_id: uuid.UUID):
        return (
            select(
                JournalLine.account_id,
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            )
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.status.in_(_BOOKED),
            )
            .group_by(JournalLine.account_id)
        )

    def _load_accounts(
        self, tenant_id: uuid.UUID, account_ids
    ) -> dict[uuid.UUID, Account]:
        ids = set(account_ids)
        accounts = self.db.execute(
            select(Account).where(
                Account.tenant_id == tenant_id,
                Account.id.in_(ids),
            )
        ).scalars().all()
        found = {a.id: a for a in accounts}
        missing = ids - set(found)
        if missing:
            raise NotFound(
                f"Accounts not found: {sorted(str(m) for m in missing)}"
            )
        return found

    def balance_as_of(
        self, tenant_id: uuid.UUID, account_id: uuid.UUID, as_of: date
    ) -> Decimal:
        """Signed balance of one account over entries dated <= as_of."""
        return self.balances_for_range(tenant_id, [account_id], None, as_of)[
            account_id
        ]

    def balances_for_range(
        self,
        tenant_id: uuid.UUID,
        account_ids,
        date_from: date | None,
        date_to: date,
    ) -> dict[uuid.UUID, Decimal]:
        """
        Signed balances for several accounts in one query.

        Both bounds are inclusive; date_from=None means from the
        beginning of the ledger. Accounts with no lines get zero.
        """
        accounts = self._load_accounts(tenant_id, account_ids)

        query = self._totals_query(tenant_id).where(
            JournalLine.account_id.in_(list(accounts)),
            JournalEntry.posting_date <= date_to,
        )
        if date_from is not None:
            query = query.where(JournalEntry.posting_date >= date_from)

        totals = {
            account_id: (_dec(debits), _dec(credits))
            for account_id, debits, credits in self.db.execute(query).all()
        }

        balances = {}
        for account_id, account in accounts.items():
            debits, credits = totals.get(
                account_id, (Decimal("0"), Decimal("0"))
            )
            balances[account_id] = signed_balance(
                account.account_type, debits, credits
            ).quantize(QUANTUM)
        return balances

    def entry_totals(self, entry_id: uuid.UUID) -> tuple[Decimal, Decimal]:
        """Total debits and credits of a single entry."""
        debits, credits = self.db.execute(
            select(
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            ).where(JournalLine.journal_entry_id == entry_id)
        ).one()
        return _dec(debits), _dec(credits)

    def check_integrity(self, tenant_id: uuid.UUID) -> dict:
        """
        Verify the tenant's whole ledger balances.

        Returns total debits and credits across all booked entries
        and the ids of any individual entry that does not balance.
        """
        per_entry = self.db.execute(
            select(
                JournalLine.journal_entry_id,
                func.coalesce(func.sum(JournalLine.debit), 0),
                func.coalesce(func.sum(JournalLine.credit), 0),
            )
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(
                JournalEntry.tenant_id == tenant_id,
                JournalEntry.status.in_(_BOOKED),
            )
            .group_by(JournalLine.journal_entry_id)
        ).all()

        total_debits = Decimal("0")
        total_credits = Decimal("0")
        unbalanced = []
        for entry_id, debits, credits in per_entry:
            debits, credits = _dec(debits), _dec(credits)
            total_debits += debits
            total_credits += credits
            if abs(debits - credits) > self.tolerance:
                unbalanced.append(entry_id)

        difference = total_debits - total_credits
        return {
            "total_debits": total_debits,
            "total_credits": total_credits,
            "difference": difference,
            "is_balanced": not unbalanced,
            "unbalanced_entries": unbalanced,
        }
