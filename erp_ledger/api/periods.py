"""
Accounting period endpoints.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from erp_ledger.api.context import get_actor_id, get_tenant_id, http_error
from erp_ledger.models.base import get_db
from erp_ledger.schemas.ledger import PeriodRequest, PeriodResponse
from erp_ledger.services.period_service import PeriodService

router = APIRouter(prefix="/periods", tags=["Periods"])


@router.get("", response_model=list[PeriodResponse])
def list_periods(
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    """Periods with a recorded status. Months not listed are open."""
    return PeriodService(db).list_periods(tenant_id)


@router.post("/close", response_model=PeriodResponse)
def close_period(
    request: PeriodRequest,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    """
    Close the month containing period_date.

    soft=true still accepts postings but flags them for review;
    a hard close rejects them until the period is reopened.
    """
    service = PeriodService(db)
    try:
        period = service.close_period(
            tenant_id, actor_id, request.period_date, soft=request.soft
        )
        db.commit()
        return period
    except ValueError as e:
        db.rollback()
        raise http_error(e)


@router.post("/reopen", response_model=PeriodResponse)
def reopen_period(
    request: PeriodRequest,
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    actor_id: uuid.UUID = Depends(get_actor_id),
    db: Session = Depends(get_db),
):
    service = PeriodService(db)
    try:
        period = service.reopen_period(tenant_id, actor_id, request.period_date)
        db.commit()
        return period
    except ValueError as e:
        db.rollback()
        raise http_error(e)
