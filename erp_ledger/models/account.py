"""
Account model (chart of accounts).

Accounts form a tree per tenant through parent_id. Journal
lines reference accounts, so an account is never deleted once
used; it is deactivated instead.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey, UniqueConstraint,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import AccountType


DEFAULT_CHART_CODE = "primary"


class Account(Base):
    """A single account in a tenant's chart of accounts."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "chart_code", "code",
            name="uq_accounts_tenant_chart_code",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, index=True
    )
    chart_code: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_CHART_CODE
    )
    code: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(
        SAEnum(AccountType, name="account_type_enum"),
        nullable=False,
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("accounts.id"), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    parent: Mapped["Account | None"] = relationship(
        remote_side=[id], back_populates="children"
    )
    children: Mapped[list["Account"]] = relationship(back_populates="parent")

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.account_type.value})>"
