"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from erp_ledger.models.base import Base
from erp_ledger.models.enums import (
    AccountType,
    EntryType,
    EntryStatus,
    PeriodStatus,
    ViolationKind,
)
from erp_ledger.models.account import Account, DEFAULT_CHART_CODE
from erp_ledger.models.journal_entry import JournalEntry
from erp_ledger.models.journal_line import JournalLine
from erp_ledger.models.posting_link import PostingLink
from erp_ledger.models.audit_event import AuditEvent
from erp_ledger.models.accounting_period import AccountingPeriod
from erp_ledger.models.immutability import register_immutability_listeners

register_immutability_listeners()

__all__ = [
    "Base",
    "AccountType",
    "EntryType",
    "EntryStatus",
    "PeriodStatus",
    "ViolationKind",
    "Account",
    "DEFAULT_CHART_CODE",
    "JournalEntry",
    "JournalLine",
    "PostingLink",
    "AuditEvent",
    "AccountingPeriod",
]
