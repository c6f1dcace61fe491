"""
Pydantic schemas for chart-of-accounts operations.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from erp_ledger.models.account import DEFAULT_CHART_CODE
from erp_ledger.models.enums import AccountType


class AccountCreate(BaseModel):
    """Request to create an account in the chart of accounts."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=150)
    account_type: AccountType
    parent_id: uuid.UUID | None = None
    chart_code: str = Field(
        default=DEFAULT_CHART_CODE, min_length=1, max_length=50
    )


class AccountRename(BaseModel):
    name: str = Field(min_length=1, max_length=150)


class AccountResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    chart_code: str
    code: str
    name: str
    account_type: AccountType
    parent_id: uuid.UUID | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """Signed balance of one account as of a date."""
    account_id: uuid.UUID
    account_code: str
    account_type: AccountType
    as_of: date
    balance: Decimal
