"""
Payment posting.

Customer receipt:
    Dr Cash / Bank
        Cr Accounts Receivable

Vendor payment:
    Dr Accounts Payable
        Cr Cash / Bank

The amount is the sum of the payment's allocations.
"""

from erp_ledger.exceptions import InvalidEntry
from erp_ledger.schemas.documents import Payment, PaymentMethod, PaymentType
from erp_ledger.strategies.base import AccountResolver, PostingStrategy, ProposedEntry


class PaymentStrategy(PostingStrategy):

    source_type = "payment"

    def propose(self, document: Payment, accounts: AccountResolver) -> ProposedEntry:
        amount = document.total_allocated
        if amount <= 0:
            raise InvalidEntry(f"Payment {document.id} has no allocated amount")

        money = accounts.role(
            "cash" if document.method == PaymentMethod.CASH else "bank"
        )
        label = document.reference or document.id

        if document.type == PaymentType.RECEIPT:
            entry = ProposedEntry(
                posting_date=document.payment_date,
                memo=f"Customer receipt {label}",
            )
            entry.debit(money, amount, f"Received {label}")
            entry.credit(accounts.role("receivable"), amount, f"Settles {label}")
        else:
            entry = ProposedEntry(
                posting_date=document.payment_date,
                memo=f"Vendor payment {label}",
            )
            entry.debit(accounts.role("payable"), amount, f"Settles {label}")
            entry.credit(money, amount, f"Paid {label}")
        return entry
