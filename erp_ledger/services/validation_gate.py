"""
Validation gate: pre-posting checks.

Runs before the posting engine writes anything. Every problem
found is collected as a Violation, so the caller can show the
full list ("invoice total doesn't balance", "account 4000 is
inactive") instead of the first error only. Any violation
blocks the posting.

Checks, in order:
1. At least two lines; amounts non-negative; one side per line
2. Total debits equal total credits within the tolerance
3. Every account exists for the tenant and is active
4. The posting date is not in a hard-closed period
"""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from erp_ledger.config import get_settings
from erp_ledger.exceptions import (
    ClosedPeriod,
    ImbalancedEntry,
    InactiveAccount,
    InvalidEntry,
    LedgerError,
    UnknownAccount,
)
from erp_ledger.models.enums import ViolationKind
from erp_ledger.schemas.posting import PostingLine, ValidationResult, Violation
from erp_ledger.services.ledger_store import LedgerStore, line_totals
from erp_ledger.services.period_service import PeriodService


_ERROR_FOR_KIND: dict[ViolationKind, type[LedgerError]] = {
    ViolationKind.IMBALANCED: ImbalancedEntry,
    ViolationKind.UNKNOWN_ACCOUNT: UnknownAccount,
    ViolationKind.INACTIVE_ACCOUNT: InactiveAccount,
    ViolationKind.CLOSED_PERIOD: ClosedPeriod,
    ViolationKind.TOO_FEW_LINES: InvalidEntry,
    ViolationKind.INVALID_LINE: InvalidEntry,
}


def error_for(result: ValidationResult) -> LedgerError:
    """
    Turn a failed validation into the typed error to report.

    The error type follows the first violation; all violations
    travel with it.
    """
    first = result.violations[0]
    message = "; ".join(v.message for v in result.violations)
    return _ERROR_FOR_KIND[first.kind](message, violations=result.violations)


class ValidationGate:

    def __init__(
        self,
        db: Session,
        period_service: PeriodService | None = None,
        tolerance: Decimal | None = None,
        allow_zero_amount_lines: bool | None = None,
    ):
        settings = get_settings()
        self.db = db
        self.store = LedgerStore(db, tolerance)
        self.periods = period_service or PeriodService(db)
        self.tolerance = self.store.tolerance
        self.allow_zero_amount_lines = (
            allow_zero_amount_lines if allow_zero_amount_lines is not None
            else settings.ALLOW_ZERO_AMOUNT_LINES
        )

    def validate(
        self,
        tenant_id: uuid.UUID,
        lines: list[PostingLine],
        posting_date: date,
        check_balance: bool = True,
    ) -> ValidationResult:
        """
        Check a candidate line set. Never writes.

        check_balance=False skips the debit/credit comparison; the
        reversal engine uses it because a side-swapped copy of a
        balanced entry is balanced by construction.
        """
        result = ValidationResult()

        self._check_structure(lines, result)
        if check_balance:
            self._check_balance(lines, result)
        self._check_accounts(tenant_id, lines, result)
        self._check_period(tenant_id, posting_date, result)

        return result

    def _check_structure(
        self, lines: list[PostingLine], result: ValidationResult
    ) -> None:
        if len(lines) < 2:
            result.violations.append(Violation(
                kind=ViolationKind.TOO_FEW_LINES,
                message=f"An entry needs at least two lines, got {len(lines)}",
            ))

        for line_no, line in enumerate(lines, start=1):
            if line.debit < 0 or line.credit < 0:
                result.violations.append(Violation(
                    kind=ViolationKind.INVALID_LINE,
                    message=f"Line {line_no}: amounts cannot be negative",
                    line_no=line_no,
                ))
            elif line.debit > 0 and line.credit > 0:
                result.violations.append(Violation(
                    kind=ViolationKind.INVALID_LINE,
                    message=f"Line {line_no}: cannot have both debit and credit",
                    line_no=line_no,
                ))
            elif line.debit == 0 and line.credit == 0 and not self.allow_zero_amount_lines:
                result.violations.append(Violation(
                    kind=ViolationKind.INVALID_LINE,
                    message=f"Line {line_no}: both debit and credit are zero",
                    line_no=line_no,
                ))

    def _check_balance(
        self, lines: list[PostingLine], result: ValidationResult
    ) -> None:
        total_debit, total_credit = line_totals(lines)
        if abs(total_debit - total_credit) > self.tolerance:
            result.violations.append(Violation(
                kind=ViolationKind.IMBALANCED,
                message=(
                    f"Entry is not balanced: debits ({total_debit}) "
                    f"!= credits ({total_credit})"
                ),
            ))

    def _check_accounts(
        self,
        tenant_id: uuid.UUID,
        lines: list[PostingLine],
        result: ValidationResult,
    ) -> None:
        accounts = self.store.get_accounts(
            tenant_id, (line.account_id for line in lines)
        )
        for line_no, line in enumerate(lines, start=1):
            account = accounts.get(line.account_id)
            if account is None:
                result.violations.append(Violation(
                    kind=ViolationKind.UNKNOWN_ACCOUNT,
                    message=f"Line {line_no}: account {line.account_id} not found",
                    line_no=line_no,
                ))
            elif not account.is_active:
                result.violations.append(Violation(
                    kind=ViolationKind.INACTIVE_ACCOUNT,
                    message=f"Line {line_no}: account {account.code} is not active",
                    line_no=line_no,
                ))

    def _check_period(
        self,
        tenant_id: uuid.UUID,
        posting_date: date,
        result: ValidationResult,
    ) -> None:
        check = self.periods.check_posting_date(tenant_id, posting_date)
        if not check.allowed:
            result.violations.append(Violation(
                kind=ViolationKind.CLOSED_PERIOD,
                message=check.message,
            ))
        elif check.message:
            result.warnings.append(check.message)
