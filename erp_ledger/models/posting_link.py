"""
Posting link model.

Ties a source business document (sales invoice, payment,
payroll run, ...) to the journal entry it produced. At most
one active link may exist per (tenant, source_type, source_id);
the partial unique index is the idempotency guard that makes
concurrent posts of the same document collide in the database.

When an entry is reversed its link is deactivated, so the
corrected document can be posted again.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Boolean, DateTime, ForeignKey, Index, Uuid, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from erp_ledger.models.base import Base


class PostingLink(Base):

    __tablename__ = "posting_links"
    __table_args__ = (
        Index(
            "uq_posting_links_active_source",
            "tenant_id", "source_type", "source_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    source_id: Mapped[str] = mapped_column(String(100), nullable=False)
    journal_entry_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    journal_entry: Mapped["JournalEntry"] = relationship()

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return (
            f"<PostingLink {self.source_type}:{self.source_id} "
            f"-> {self.journal_entry_id} ({state})>"
        )
