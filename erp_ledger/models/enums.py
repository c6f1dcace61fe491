"""
Shared enumerations for database models.

Python enums mapped to database enums ensure only valid
values can be stored.
"""

import enum


class EntryType(str, enum.Enum):
    """Side of a journal line."""
    DEBIT = "debit"
    CREDIT = "credit"


class AccountType(str, enum.Enum):
    """
    Account classification in the chart of accounts.

    Contra types carry the opposite natural balance of the
    type they offset (e.g. accumulated depreciation is a
    contra_asset with a credit balance).
    """
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"
    CONTRA_ASSET = "contra_asset"
    CONTRA_LIABILITY = "contra_liability"
    CONTRA_EQUITY = "contra_equity"
    CONTRA_INCOME = "contra_income"
    CONTRA_EXPENSE = "contra_expense"

    @property
    def is_contra(self) -> bool:
        return self.value.startswith("contra_")

    @property
    def base_type(self) -> "AccountType":
        """The non-contra type this account offsets (itself if not contra)."""
        if self.is_contra:
            return AccountType(self.value[len("contra_"):])
        return self

    @property
    def normal_side(self) -> EntryType:
        """Side on which the account's balance naturally increases."""
        natural = (
            EntryType.DEBIT
            if self.base_type in (AccountType.ASSET, AccountType.EXPENSE)
            else EntryType.CREDIT
        )
        if not self.is_contra:
            return natural
        return EntryType.CREDIT if natural == EntryType.DEBIT else EntryType.DEBIT


class EntryStatus(str, enum.Enum):
    """Journal entry lifecycle."""
    DRAFT = "draft"
    POSTED = "posted"
    REVERSED = "reversed"


class PeriodStatus(str, enum.Enum):
    """Accounting period lock state."""
    OPEN = "open"
    SOFT_CLOSED = "soft_closed"
    HARD_CLOSED = "hard_closed"


class ViolationKind(str, enum.Enum):
    """Reasons the validation gate can block a posting."""
    IMBALANCED = "imbalanced"
    UNKNOWN_ACCOUNT = "unknown_account"
    INACTIVE_ACCOUNT = "inactive_account"
    CLOSED_PERIOD = "closed_period"
    TOO_FEW_LINES = "too_few_lines"
    INVALID_LINE = "invalid_line"
