"""
Payroll run posting.

    Dr Salary Expense         gross pay + employer contributions
        Cr Payroll Tax Payable    employee taxes
        Cr Deductions Payable     employee deductions + employer contributions
        Cr Cash                   net pay

Only lines marked as included are posted. Amounts are the
values resolved when each earning or deduction was built.
"""

from decimal import Decimal

from erp_ledger.exceptions import InvalidEntry
from erp_ledger.schemas.documents import PayrollRun
from erp_ledger.strategies.base import AccountResolver, PostingStrategy, ProposedEntry


class PayrollRunStrategy(PostingStrategy):

    source_type = "payroll_run"

    def propose(self, document: PayrollRun, accounts: AccountResolver) -> ProposedEntry:
        included = document.included_lines
        if not included:
            raise InvalidEntry(f"Payroll run {document.id} has no included lines")

        for line in included:
            if line.net_pay < 0:
                raise InvalidEntry(
                    f"Employee {line.employee_id}: taxes and deductions "
                    f"exceed gross pay"
                )

        gross = sum((l.gross_pay for l in included), Decimal("0"))
        taxes = sum((l.total_taxes for l in included), Decimal("0"))
        deductions = sum((l.total_deductions for l in included), Decimal("0"))
        employer = sum((l.employer_cost for l in included), Decimal("0"))
        net = sum((l.net_pay for l in included), Decimal("0"))

        period = f"{document.period_start} to {document.period_end}"
        entry = ProposedEntry(
            posting_date=document.pay_date,
            memo=f"Payroll {period}",
        )

        entry.debit(
            accounts.role("salary_expense"), gross + employer,
            f"Salaries and employer contributions {period}",
        )
        if taxes > 0:
            entry.credit(
                accounts.role("payroll_tax_payable"), taxes, "Employee taxes withheld"
            )
        if deductions + employer > 0:
            entry.credit(
                accounts.role("deductions_payable"), deductions + employer,
                "Deductions and employer contributions",
            )
        if net > 0:
            entry.credit(accounts.role("cash"), net, "Net pay")
        return entry
