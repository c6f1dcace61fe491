"""
Accounting period model.

Periods are calendar months. A month with no row is open.
Soft-closed periods still accept postings (with a warning);
hard-closed periods reject them.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date, DateTime, UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from erp_ledger.models.base import Base
from erp_ledger.models.enums import PeriodStatus


class AccountingPeriod(Base):

    __tablename__ = "accounting_periods"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "period_start",
            name="uq_accounting_periods_tenant_start",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[PeriodStatus] = mapped_column(
        SAEnum(
            PeriodStatus,
            name="period_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=PeriodStatus.OPEN,
    )
    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )
    closed_by_actor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def is_locked(self) -> bool:
        return self.status == PeriodStatus.HARD_CLOSED

    def __repr__(self) -> str:
        return f"<AccountingPeriod {self.period_start} ({self.status.value})>"
