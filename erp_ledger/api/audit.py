"""
Audit trail endpoint (read-only).
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from erp_ledger.api.context import get_tenant_id
from erp_ledger.models.base import get_db
from erp_ledger.schemas.ledger import AuditEventResponse
from erp_ledger.services.audit_logger import AuditLogger

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get("/events", response_model=list[AuditEventResponse])
def list_audit_events(
    entity_type: str | None = None,
    entity_id: str | None = None,
    action: str | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    tenant_id: uuid.UUID = Depends(get_tenant_id),
    db: Session = Depends(get_db),
):
    return AuditLogger(db).list_events(
        tenant_id, entity_type, entity_id, action, limit
    )
