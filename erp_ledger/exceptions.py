"""
Typed errors for the posting and reversal engines.

Every error carries a machine-readable code so callers can
react by type instead of parsing messages. All of them are
ValueErrors, so the API layer can keep treating them as
client errors.

    LedgerError
    +-- ImbalancedEntry
    +-- InvalidEntry
    +-- UnknownAccount
    +-- InactiveAccount
    +-- ClosedPeriod
    +-- SourceAlreadyPosted
    +-- NotFound
    +-- NotPosted
    +-- AlreadyReversed
    +-- ImmutableRecord
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from erp_ledger.schemas.posting import Violation


class LedgerError(ValueError):
    """Base class for every error the ledger core reports."""

    code = "ledger_error"

    def __init__(
        self,
        message: str,
        violations: list["Violation"] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.violations = list(violations or [])


class ImbalancedEntry(LedgerError):
    """Total debits and total credits differ by more than the tolerance."""
    code = "imbalanced_entry"


class InvalidEntry(LedgerError):
    """Structural problem with the line set (too few lines, bad amounts)."""
    code = "invalid_entry"


class UnknownAccount(LedgerError):
    code = "unknown_account"


class InactiveAccount(LedgerError):
    code = "inactive_account"


class ClosedPeriod(LedgerError):
    code = "closed_period"


class SourceAlreadyPosted(LedgerError):
    """The source document was already posted with different lines."""
    code = "source_already_posted"


class NotFound(LedgerError):
    code = "not_found"


class NotPosted(LedgerError):
    code = "not_posted"


class AlreadyReversed(LedgerError):
    code = "already_reversed"


class ImmutableRecord(LedgerError):
    """Attempt to modify a posted entry, its lines, or an audit event."""
    code = "immutable_record"
