"""Ledger services."""

from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.balance_calculator import BalanceCalculator
from erp_ledger.services.validation_gate import ValidationGate
from erp_ledger.services.posting_engine import PostingEngine
from erp_ledger.services.reversal_engine import ReversalEngine
from erp_ledger.services.audit_logger import AuditLogger
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.period_service import PeriodService
from erp_ledger.services.document_posting import DocumentPostingService

__all__ = [
    "LedgerStore",
    "BalanceCalculator",
    "ValidationGate",
    "PostingEngine",
    "ReversalEngine",
    "AuditLogger",
    "AccountService",
    "PeriodService",
    "DocumentPostingService",
]
