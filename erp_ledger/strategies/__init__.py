"""
Posting strategies, one per source document type.

default_strategies() returns the built-in set keyed by source
type, ready to register with DocumentPostingService.
"""

from erp_ledger.strategies.base import (
    AccountCodes,
    AccountResolver,
    PostingStrategy,
    ProposedEntry,
)
from erp_ledger.strategies.inventory import InventoryMovementStrategy
from erp_ledger.strategies.payment import PaymentStrategy
from erp_ledger.strategies.payroll import PayrollRunStrategy
from erp_ledger.strategies.purchase import PurchaseDocStrategy
from erp_ledger.strategies.sales import SalesDocStrategy


def default_strategies() -> dict[str, PostingStrategy]:
    strategies = [
        SalesDocStrategy(),
        PurchaseDocStrategy(),
        PaymentStrategy(),
        InventoryMovementStrategy(),
        PayrollRunStrategy(),
    ]
    return {s.source_type: s for s in strategies}


__all__ = [
    "AccountCodes",
    "AccountResolver",
    "PostingStrategy",
    "ProposedEntry",
    "SalesDocStrategy",
    "PurchaseDocStrategy",
    "PaymentStrategy",
    "InventoryMovementStrategy",
    "PayrollRunStrategy",
    "default_strategies",
]
