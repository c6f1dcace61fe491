"""
ORM-level immutability rules.

SQLAlchemy fires before_update / before_delete events during
flush, before any SQL reaches the database. These listeners
reject changes that would rewrite financial history:

    JournalEntry  posted entries only move posted -> reversed
                  (status and reversed_by_id); nothing else changes
    JournalLine   frozen as soon as the parent entry leaves draft
    AuditEvent    never updated, never deleted

Bulk UPDATE statements bypass these events; the only one the
ledger issues is LedgerStore.mark_reversed, which guards itself
with a status condition.
"""

import logging

from sqlalchemy import event, inspect
from sqlalchemy.orm.attributes import get_history

from erp_ledger.exceptions import ImmutableRecord
from erp_ledger.models.audit_event import AuditEvent
from erp_ledger.models.enums import EntryStatus
from erp_ledger.models.journal_entry import JournalEntry
from erp_ledger.models.journal_line import JournalLine

logger = logging.getLogger(__name__)

# Fields a posted entry may change on its way to REVERSED
_REVERSAL_FIELDS = {"status", "reversed_by_id", "reversed_by"}


def _blocked(entity_type: str, entity_id, reason: str) -> ImmutableRecord:
    logger.error(
        "Blocked modification of %s %s: %s", entity_type, entity_id, reason
    )
    return ImmutableRecord(f"{entity_type} {entity_id}: {reason}")


def _changed_fields(target) -> set[str]:
    return {
        attr.key for attr in inspect(target).attrs
        if attr.history.has_changes()
    }


def _check_journal_entry_update(mapper, connection, target):
    history = get_history(target, "status")
    previous = history.deleted[0] if history.deleted else target.status

    if previous == EntryStatus.DRAFT:
        return

    if previous == EntryStatus.REVERSED:
        raise _blocked("JournalEntry", target.id, "entry is already reversed")

    # previous == POSTED: only the reversal transition is allowed
    changed = _changed_fields(target)
    if target.status != EntryStatus.REVERSED or changed - _REVERSAL_FIELDS:
        raise _blocked(
            "JournalEntry", target.id,
            f"cannot modify {sorted(changed)} on a posted entry",
        )


def _check_journal_entry_delete(mapper, connection, target):
    if target.status != EntryStatus.DRAFT:
        raise _blocked(
            "JournalEntry", target.id,
            f"{target.status.value} entries cannot be deleted",
        )


def _check_journal_line_change(mapper, connection, target):
    entry = target.entry
    if entry is not None and entry.status != EntryStatus.DRAFT:
        raise _blocked(
            "JournalLine", target.id,
            "lines of a posted entry cannot be modified or deleted",
        )


def _check_audit_event_change(mapper, connection, target):
    raise _blocked("AuditEvent", target.id, "audit events are append-only")


def register_immutability_listeners() -> None:
    """Install the listeners. Idempotent."""
    pairs = [
        (JournalEntry, "before_update", _check_journal_entry_update),
        (JournalEntry, "before_delete", _check_journal_entry_delete),
        (JournalLine, "before_update", _check_journal_line_change),
        (JournalLine, "before_delete", _check_journal_line_change),
        (AuditEvent, "before_update", _check_audit_event_change),
        (AuditEvent, "before_delete", _check_audit_event_change),
    ]
    for model, name, fn in pairs:
        if not event.contains(model, name, fn):
            event.listen(model, name, fn)
