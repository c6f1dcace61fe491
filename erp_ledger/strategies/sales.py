"""
Sales invoice posting.

    Dr Accounts Receivable   total
        Cr Revenue               subtotal
        Cr Sales Tax Payable     tax
    Dr Cost of Goods Sold    cost of goods shipped
        Cr Inventory             cost of goods shipped
"""

from decimal import Decimal

from erp_ledger.exceptions import InvalidEntry
from erp_ledger.schemas.documents import SalesDoc
from erp_ledger.strategies.base import AccountResolver, PostingStrategy, ProposedEntry


class SalesDocStrategy(PostingStrategy):

    source_type = "sales_doc"

    def propose(self, document: SalesDoc, accounts: AccountResolver) -> ProposedEntry:
        if document.doc_type != "invoice":
            raise InvalidEntry(
                f"Only invoices are posted to the ledger, got {document.doc_type}"
            )

        label = document.number or document.id
        entry = ProposedEntry(
            posting_date=document.issue_date,
            memo=f"Sales invoice {label}",
        )

        entry.debit(accounts.role("receivable"), document.total, f"Invoice {label}")
        if document.subtotal > 0:
            entry.credit(accounts.role("revenue"), document.subtotal, f"Revenue {label}")
        if document.tax_amount > 0:
            entry.credit(
                accounts.role("sales_tax_payable"), document.tax_amount,
                f"Sales tax {label}",
            )

        cost = sum((line.cost for line in document.lines), Decimal("0"))
        if cost > 0:
            entry.debit(accounts.role("cogs"), cost, f"Cost of goods sold {label}")
            entry.credit(accounts.role("inventory"), cost, f"Inventory out {label}")

        return entry
