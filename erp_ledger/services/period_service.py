"""
Period service: the accounting-period lock.

Periods are calendar months. A month with no row is open, so
tenants never have to create periods before their first post.

    open         posting allowed
    soft_closed  posting allowed, with a warning for review
    hard_closed  posting rejected until the period is reopened
"""

import calendar
import uuid
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.models.accounting_period import AccountingPeriod
from erp_ledger.models.enums import PeriodStatus
from erp_ledger.services.audit_logger import AuditLogger


def period_bounds(any_day: date) -> tuple[date, date]:
    """First and last day of the month containing any_day."""
    last_day = calendar.monthrange(any_day.year, any_day.month)[1]
    return any_day.replace(day=1), any_day.replace(day=last_day)


def period_label(period_start: date) -> str:
    return period_start.strftime("%B %Y")


@dataclass(frozen=True)
class PeriodCheck:
    allowed: bool
    status: PeriodStatus
    message: str | None = None


class PeriodService:

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditLogger(db)

    def get_period(
        self, tenant_id: uuid.UUID, any_day: date
    ) -> AccountingPeriod | None:
        period_start, _ = period_bounds(any_day)
        return self.db.execute(
            select(AccountingPeriod).where(
                AccountingPeriod.tenant_id == tenant_id,
                AccountingPeriod.period_start == period_start,
            )
        ).scalar_one_or_none()

    def status_for(self, tenant_id: uuid.UUID, any_day: date) -> PeriodStatus:
        period = self.get_period(tenant_id, any_day)
        return period.status if period else PeriodStatus.OPEN

    def is_closed(self, tenant_id: uuid.UUID, posting_date: date) -> bool:
        """True when postings dated posting_date are blocked."""
        return self.status_for(tenant_id, posting_date) == PeriodStatus.HARD_CLOSED

    def check_posting_date(
        self, tenant_id: uuid.UUID, posting_date: date
    ) -> PeriodCheck:
        status = self.status_for(tenant_id, posting_date)
        label = period_label(period_bounds(posting_date)[0])

        if status == PeriodStatus.HARD_CLOSED:
            return PeriodCheck(
                allowed=False,
                status=status,
                message=f"Cannot post to closed period {label}. "
                        f"Reopen the period first.",
            )
        if status == PeriodStatus.SOFT_CLOSED:
            return PeriodCheck(
                allowed=True,
                status=status,
                message=f"Period {label} is soft-closed. Transaction will "
                        f"be recorded but the period should be reviewed.",
            )
        return PeriodCheck(allowed=True, status=status)

    def _set_status(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        any_day: date,
        new_status: PeriodStatus,
        action: str,
    ) -> AccountingPeriod:
        period = self.get_period(tenant_id, any_day)
        if period is None:
            period_start, period_end = period_bounds(any_day)
            period = AccountingPeriod(
                tenant_id=tenant_id,
                period_start=period_start,
                period_end=period_end,
                status=PeriodStatus.OPEN,
            )
            self.db.add(period)

        old_status = period.status
        period.status = new_status
        if new_status == PeriodStatus.OPEN:
            period.closed_at = None
            period.closed_by_actor_id = None
        else:
            period.closed_at = datetime.utcnow()
            period.closed_by_actor_id = actor_id
        self.db.flush()

        self.audit.record(
            tenant_id, actor_id,
            entity_type="accounting_period",
            entity_id=period.period_start.isoformat(),
            action=action,
            details={
                "previous_status": old_status.value,
                "new_status": new_status.value,
            },
        )
        return period

    def close_period(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        any_day: date,
        soft: bool = False,
    ) -> AccountingPeriod:
        """Close the month containing any_day. Flushes; caller commits."""
        if soft:
            return self._set_status(
                tenant_id, actor_id, any_day,
                PeriodStatus.SOFT_CLOSED, "period_soft_closed",
            )
        return self._set_status(
            tenant_id, actor_id, any_day,
            PeriodStatus.HARD_CLOSED, "period_closed",
        )

    def reopen_period(
        self, tenant_id: uuid.UUID, actor_id: uuid.UUID, any_day: date
    ) -> AccountingPeriod:
        return self._set_status(
            tenant_id, actor_id, any_day,
            PeriodStatus.OPEN, "period_reopened",
        )

    def list_periods(self, tenant_id: uuid.UUID) -> list[AccountingPeriod]:
        periods = self.db.execute(
            select(AccountingPeriod)
            .where(AccountingPeriod.tenant_id == tenant_id)
            .order_by(AccountingPeriod.period_start)
        ).scalars().all()
        return list(periods)
