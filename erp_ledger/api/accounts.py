"""
Chart of accounts endpoints.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.api.context import get_actor_id, get_tenant_id, http_error
from erp_ledger.models.account import DEFAULT_CHART_CODE
from erp_ledger.models.base import get_db
from erp_ledger.schemas.account import (
    AccountBalanceResponse,
    AccountCreate,
    AccountRename,
    AccountResponse,
)
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.balance_calculator import BalanceCalculator

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """Create an account in the chart of accounts."""
    service = AccountService(db)
    try:
        account = service.create_account(tenant_id, actor_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    active_only: bool = False,
    chart_code: str = DEFAULT_CHART_CODE,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    return AccountService(db).list_accounts(tenant_id, active_only, chart_code)


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: uuid.UUID,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    try:
        return AccountService(db).get_account(tenant_id, account_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{account_id}", response_model=AccountResponse)
def rename_account(
    account_id: uuid.UUID,
    request: AccountRename,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        account = service.rename_account(tenant_id, actor_id, account_id, request)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    account_id: uuid.UUID,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """
    Deactivate an account.

    The account keeps its history and balance but rejects new
    postings until it is reactivated.
    """
    service = AccountService(db)
    try:
        account = service.deactivate_account(tenant_id, actor_id, account_id)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/{account_id}/reactivate", response_model=AccountResponse)
def reactivate_account(
    account_id: uuid.UUID,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        account = service.reactivate_account(tenant_id, actor_id, account_id)
        db.commit()
        return account
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_id: uuid.UUID,
    as_of: date | None = None,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """
    Signed balance of an account as of a date (default today).

    Balance is calculated from journal lines, never stored.
    """
    as_of = as_of or date.today()
    try:
        account = AccountService(db).get_account(tenant_id, account_id)
        balance = BalanceCalculator(db).balance_as_of(tenant_id, account_id, as_of)
    except ValueError as e:
        raise http_error(e)

    return AccountBalanceResponse(
        account_id=account.id,
        account_code=account.code,
        account_type=account.account_type,
        as_of=as_of,
        balance=balance,
    )
