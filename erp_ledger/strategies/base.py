"""
Base classes for posting strategies.

A strategy knows how one kind of source document (an invoice,
a payment, a payroll run) becomes debit and credit lines. It
only derives amounts and picks accounts; it never writes to
the ledger. The posting engine validates and stores whatever
the strategy proposes.

Accounts are chosen by role ("receivable", "revenue") and
resolved to account ids through the tenant's chart of
accounts, so each tenant can map roles to its own codes.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.exceptions import InactiveAccount, UnknownAccount
from erp_ledger.models.account import Account, DEFAULT_CHART_CODE
from erp_ledger.schemas.posting import PostingLine


@dataclass(frozen=True)
class AccountCodes:
    """Account code for each role a strategy can post to."""
    cash: str = "1000"
    bank: str = "1010"
    receivable: str = "1200"
    inventory: str = "1400"
    payable: str = "2000"
    inventory_clearing: str = "2050"
    payroll_tax_payable: str = "2100"
    deductions_payable: str = "2110"
    sales_tax_payable: str = "2200"
    revenue: str = "4000"
    cogs: str = "5100"
    salary_expense: str = "5200"
    expense: str = "6000"

    @classmethod
    def roles(cls) -> list[str]:
        return [f.name for f in fields(cls)]


class AccountResolver:
    """
    Resolves account roles to a tenant's account ids.

    Lookups are cached for the life of the resolver, which is
    one document posting.
    """

    def __init__(
        self,
        db: Session,
        tenant_id: uuid.UUID,
        codes: AccountCodes | None = None,
        chart_code: str = DEFAULT_CHART_CODE,
    ):
        self.db = db
        self.tenant_id = tenant_id
        self.codes = codes or AccountCodes()
        self.chart_code = chart_code
        self._cache: dict[str, uuid.UUID] = {}

    def by_code(self, code: str) -> uuid.UUID:
        """
        Raises:
            UnknownAccount: no account with this code.
            InactiveAccount: the account is deactivated.
        """
        if code in self._cache:
            return self._cache[code]

        account = self.db.execute(
            select(Account).where(
                Account.tenant_id == self.tenant_id,
                Account.chart_code == self.chart_code,
                Account.code == code,
            )
        ).scalar_one_or_none()
        if account is None:
            raise UnknownAccount(f"Account {code} not found in chart of accounts")
        if not account.is_active:
            raise InactiveAccount(f"Account {code} is not active")

        self._cache[code] = account.id
        return account.id

    def role(self, name: str) -> uuid.UUID:
        """Account id for a role, e.g. resolver.role("receivable")."""
        return self.by_code(getattr(self.codes, name))


@dataclass
class ProposedEntry:
    """What a strategy hands to the posting engine."""
    posting_date: date
    memo: str
    lines: list[PostingLine] = field(default_factory=list)

    def debit(self, account_id: uuid.UUID, amount: Decimal, description: str) -> None:
        self.lines.append(
            PostingLine(account_id=account_id, debit=amount, description=description)
        )

    def credit(self, account_id: uuid.UUID, amount: Decimal, description: str) -> None:
        self.lines.append(
            PostingLine(account_id=account_id, credit=amount, description=description)
        )


class PostingStrategy(ABC):
    """Turns one type of source document into a proposed entry."""

    # Source type this strategy posts, e.g. "sales_doc"
    source_type: str

    @abstractmethod
    def propose(self, document, accounts: AccountResolver) -> ProposedEntry:
        """
        Derive the posting date, memo and lines for a document.

        Raises InvalidEntry when the document cannot be posted,
        and UnknownAccount/InactiveAccount from the resolver.
        """
