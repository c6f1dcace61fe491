"""
Journal endpoints.

A thin HTTP wrapper over the posting and reversal engines.
Domain modules in the same process call the engines directly;
these endpoints serve external callers and operators.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from erp_ledger.api.context import (
    get_actor_id,
    get_tenant_id,
    http_error,
    result_error,
)
from erp_ledger.models.base import get_db
from erp_ledger.models.enums import EntryStatus
from erp_ledger.schemas.ledger import (
    BalancesResponse,
    IntegrityResponse,
    JournalEntryResponse,
    PostingRequest,
    ReversalRequest,
)
from erp_ledger.schemas.posting import (
    PostingContext,
    PostingResult,
    ReversalContext,
    ReversalResult,
)
from erp_ledger.services.balance_calculator import BalanceCalculator
from erp_ledger.services.ledger_store import LedgerStore
from erp_ledger.services.posting_engine import PostingEngine
from erp_ledger.services.reversal_engine import ReversalEngine

router = APIRouter(prefix="/journal", tags=["Journal"])


@router.post("/post", response_model=PostingResult, status_code=201)
def post_entry(
    request: PostingRequest,
    response: Response,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """
    Post a balanced journal entry for a source document.

    Posting the same source again with the same lines returns
    the existing entry with idempotent=true and status 200.
    """
    result = PostingEngine(db).post(
        PostingContext(
            tenant_id=tenant_id,
            actor_id=actor_id,
            **request.model_dump(),
        )
    )
    if not result.success:
        raise result_error(result.error)
    if result.idempotent:
        response.status_code = 200
    return result


@router.post(
    "/entries/{entry_id}/reverse",
    response_model=ReversalResult,
    status_code=201,
)
def reverse_entry(
    entry_id: uuid.UUID,
    request: ReversalRequest,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """Reverse a posted entry by posting its mirror image."""
    result = ReversalEngine(db).reverse(
        ReversalContext(
            tenant_id=tenant_id,
            actor_id=actor_id,
            original_entry_id=entry_id,
            **request.model_dump(),
        )
    )
    if not result.success:
        raise result_error(result.error)
    return result


@router.get("/entries/{entry_id}", response_model=JournalEntryResponse)
def get_entry(
    entry_id: uuid.UUID,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    entry = LedgerStore(db).get_entry(tenant_id, entry_id)
    if entry is None:
        raise HTTPException(
            status_code=404, detail=f"Journal entry {entry_id} not found"
        )
    return entry


@router.get("/entries", response_model=list[JournalEntryResponse])
def list_entries(
    source_type: str | None = None,
    source_id: str | None = None,
    status: EntryStatus | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """List entries, newest posting date first."""
    return LedgerStore(db).list_entries(
        tenant_id, source_type, source_id, status, limit
    )


@router.get("/balances", response_model=BalancesResponse)
def get_balances(
    account_id: list[uuid.UUID] = Query(),
    date_from: date | None = None,
    date_to: date | None = None,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """Signed balances for the given accounts over an inclusive date range."""
    date_to = date_to or date.today()
    try:
        balances = BalanceCalculator(db).balances_for_range(
            tenant_id, account_id, date_from, date_to
        )
    except ValueError as e:
        raise http_error(e)
    return BalancesResponse(date_from=date_from, date_to=date_to, balances=balances)


@router.get("/integrity", response_model=IntegrityResponse)
def check_integrity(
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """
    Verify the tenant's whole ledger.

    Total debits must equal total credits and every entry must
    balance on its own. Any other result indicates a bug.
    """
    return BalanceCalculator(db).check_integrity(tenant_id)
