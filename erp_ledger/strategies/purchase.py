"""
Purchase invoice posting.

    Dr Inventory             goods lines
    Dr Expense               service lines and tax
        Cr Accounts Payable      total
"""

from erp_ledger.exceptions import InvalidEntry
from erp_ledger.schemas.documents import PurchaseDoc
from erp_ledger.strategies.base import AccountResolver, PostingStrategy, ProposedEntry


class PurchaseDocStrategy(PostingStrategy):

    source_type = "purchase_doc"

    def propose(self, document: PurchaseDoc, accounts: AccountResolver) -> ProposedEntry:
        if document.doc_type != "invoice":
            raise InvalidEntry(
                f"Only invoices are posted to the ledger, got {document.doc_type}"
            )

        label = document.number or document.id
        entry = ProposedEntry(
            posting_date=document.issue_date,
            memo=f"Purchase invoice {label}",
        )

        for line in document.lines:
            if line.amount == 0:
                continue
            role = "inventory" if line.is_goods else "expense"
            entry.debit(
                accounts.role(role), line.amount,
                line.description or f"Purchase {label}",
            )
        if document.tax_amount > 0:
            entry.debit(
                accounts.role("expense"), document.tax_amount, f"Purchase tax {label}"
            )

        entry.credit(accounts.role("payable"), document.total, f"Bill {label}")
        return entry
