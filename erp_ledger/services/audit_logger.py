"""
Audit logger: append-only record of every state change.

The engines call this after their ledger transaction commits.
Records are never updated or deleted (the ORM listeners in
models.immutability reject both).
"""

import logging
import uuid

from pydantic_core import to_jsonable_python
from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.models.audit_event import AuditEvent

logger = logging.getLogger(__name__)


class AuditLogger:

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        entity_type: str,
        entity_id,
        action: str,
        details: dict | None = None,
    ) -> AuditEvent:
        """
        Append one audit event.

        UUIDs, Decimals and dates in details are converted to
        JSON-safe values. Flushes; the caller commits.
        """
        audit_event = AuditEvent(
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=entity_type,
            entity_id=str(entity_id),
            action=action,
            details=to_jsonable_python(details or {}),
        )
        self.db.add(audit_event)
        self.db.flush()
        logger.debug(
            "Audit %s on %s:%s by %s", action, entity_type, entity_id, actor_id
        )
        return audit_event

    def list_events(
        self,
        tenant_id: uuid.UUID,
        entity_type: str | None = None,
        entity_id=None,
        action: str | None = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Return the tenant's audit events, oldest first."""
        query = select(AuditEvent).where(AuditEvent.tenant_id == tenant_id)
        if entity_type is not None:
            query = query.where(AuditEvent.entity_type == entity_type)
        if entity_id is not None:
            query = query.where(AuditEvent.entity_id == str(entity_id))
        if action is not None:
            query = query.where(AuditEvent.action == action)
        query = query.order_by(AuditEvent.id).limit(limit)
        return list(self.db.execute(query).scalars().all())
