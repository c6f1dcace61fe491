"""
Pydantic schemas for ledger read models.

These are the shapes returned by the journal, period and audit
endpoints. They are separate from the database models because
the API shape and the storage shape are often different.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.enums import EntryStatus, PeriodStatus
from erp_ledger.schemas.posting import PostingLine


class PostingRequest(BaseModel):
    """HTTP body for posting; tenant and actor come from headers."""
    source_type: str = Field(min_length=1, max_length=50)
    source_id: str = Field(min_length=1, max_length=100)
    posting_date: date
    memo: str | None = Field(default=None, max_length=500)
    lines: list[PostingLine]


class ReversalRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=255)
    memo: str | None = Field(default=None, max_length=500)
    posting_date: date | None = None


class JournalLineResponse(BaseModel):
    id: uuid.UUID
    line_no: int
    account_id: uuid.UUID
    debit: Decimal
    credit: Decimal
    description: str | None

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    posting_date: date
    memo: str | None
    status: EntryStatus
    source_type: str
    source_id: str
    reversed_by_id: uuid.UUID | None
    posted_by_actor_id: uuid.UUID
    created_at: datetime
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}


class BalancesResponse(BaseModel):
    date_from: date | None
    date_to: date
    balances: dict[uuid.UUID, Decimal]


class IntegrityResponse(BaseModel):
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool
    unbalanced_entries: list[uuid.UUID]


class PeriodRequest(BaseModel):
    """Any date inside the month to close or reopen."""
    period_date: date
    soft: bool = False


class PeriodResponse(BaseModel):
    id: int
    period_start: date
    period_end: date
    status: PeriodStatus
    closed_at: datetime | None
    closed_by_actor_id: uuid.UUID | None

    model_config = {"from_attributes": True}


class AuditEventResponse(BaseModel):
    id: int
    actor_id: uuid.UUID
    entity_type: str
    entity_id: str
    action: str
    details: dict
    created_at: datetime

    model_config = {"from_attributes": True}
