"""
Journal entry model.

An entry is one atomic financial event made of two or more
journal lines whose debits equal their credits. Once posted,
an entry is immutable except for the single transition to
REVERSED performed by the reversal engine.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    String, Date, DateTime, ForeignKey, Index,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base
from erp_ledger.models.enums import EntryStatus


class JournalEntry(Base):

    __tablename__ = "journal_entries"
    __table_args__ = (
        Index("ix_journal_entries_tenant_date", "tenant_id", "posting_date"),
        Index(
            "ix_journal_entries_source",
            "tenant_id", "source_type", "source_id",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    posting_date: Mapped[date] = mapped_column(Date, nullable=False)
    memo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[EntryStatus] = mapped_column(
        SAEnum(
            EntryStatus,
            name="entry_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=EntryStatus.DRAFT,
    )
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_id: Mapped[str] = mapped_column(String(100), nullable=False)
    reversed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    posted_by_actor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    # Lines are owned by the entry and always loaded in line order
    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        order_by="JournalLine.line_no",
        cascade="all, delete-orphan",
    )
    reversed_by: Mapped["JournalEntry | None"] = relationship(
        remote_side=[id]
    )

    @property
    def source_ref(self) -> str:
        return f"{self.source_type}:{self.source_id}"

    def __repr__(self) -> str:
        return (
            f"<JournalEntry {self.id} {self.source_ref} "
            f"({self.status.value})>"
        )
