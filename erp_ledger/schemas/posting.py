"""
Pydantic schemas for the posting and reversal engines.

These are the in-process call contracts domain modules use:
PostingContext in, PostingResult out; ReversalContext in,
ReversalResult out. Failures come back as a typed ResultError
rather than an exception.
"""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.exceptions import LedgerError
from erp_ledger.models.enums import ViolationKind


# --- Inputs ---

class PostingLine(BaseModel):
    """One debit or credit leg a strategy wants posted."""
    account_id: uuid.UUID
    debit: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=6)
    credit: Decimal = Field(default=Decimal("0"), max_digits=19, decimal_places=6)
    description: str | None = Field(default=None, max_length=255)


class PostingContext(BaseModel):
    """
    Everything the posting engine needs to post one source document.

    (tenant_id, source_type, source_id) identifies the document;
    posting it twice returns the first entry.
    """
    tenant_id: uuid.UUID
    actor_id: uuid.UUID
    source_type: str = Field(min_length=1, max_length=50)
    source_id: str = Field(min_length=1, max_length=100)
    posting_date: date
    memo: str | None = Field(default=None, max_length=500)
    lines: list[PostingLine] = Field(default_factory=list)


class EntryHeader(BaseModel):
    """Header fields of a journal entry about to be written."""
    posting_date: date
    memo: str | None = None
    source_type: str
    source_id: str
    posted_by_actor_id: uuid.UUID


class ReversalContext(BaseModel):
    tenant_id: uuid.UUID
    actor_id: uuid.UUID
    original_entry_id: uuid.UUID
    reason: str = Field(min_length=1, max_length=255)
    memo: str | None = Field(default=None, max_length=500)
    # Defaults to today when not given
    posting_date: date | None = None


# --- Validation ---

class Violation(BaseModel):
    """A single reason the validation gate blocked a posting."""
    kind: ViolationKind
    message: str
    line_no: int | None = None


class ValidationResult(BaseModel):
    violations: list[Violation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def kinds(self) -> set[ViolationKind]:
        return {v.kind for v in self.violations}


# --- Results ---

class ResultError(BaseModel):
    """Typed error returned instead of raised."""
    code: str
    message: str
    violations: list[Violation] = Field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: LedgerError) -> "ResultError":
        return cls(
            code=exc.code,
            message=exc.message,
            violations=exc.violations,
        )


class PostingResult(BaseModel):
    success: bool
    journal_entry_id: uuid.UUID | None = None
    idempotent: bool = False
    line_count: int = 0
    warnings: list[str] = Field(default_factory=list)
    error: ResultError | None = None

    @classmethod
    def failed(cls, exc: LedgerError) -> "PostingResult":
        return cls(success=False, error=ResultError.from_exception(exc))


class ReversalResult(BaseModel):
    success: bool
    original_entry_id: uuid.UUID
    reversal_entry_id: uuid.UUID | None = None
    error: ResultError | None = None
