"""
Account service: manages the chart of accounts.

Accounts are created, renamed, deactivated and reactivated,
but never deleted: journal lines reference them forever.
A deactivated account rejects new postings and keeps its
history and balance.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from erp_ledger.exceptions import NotFound
from erp_ledger.models.account import Account, DEFAULT_CHART_CODE
from erp_ledger.schemas.account import AccountCreate, AccountRename
from erp_ledger.services.audit_logger import AuditLogger

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db
        self.audit = AuditLogger(db)

    def create_account(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        request: AccountCreate,
    ) -> Account:
        """
        Create an account in the tenant's chart of accounts.

        Account codes must be unique per tenant and chart. A parent
        account, if given, must belong to the same tenant and chart.
        """
        existing = self.get_by_code(tenant_id, request.code, request.chart_code)
        if existing:
            raise ValueError(
                f"Account with code '{request.code}' already exists "
                f"in chart '{request.chart_code}'"
            )

        if request.parent_id is not None:
            parent = self.db.get(Account, request.parent_id)
            if (
                parent is None
                or parent.tenant_id != tenant_id
                or parent.chart_code != request.chart_code
            ):
                raise ValueError(
                    f"Parent account {request.parent_id} not found"
                )

        account = Account(
            tenant_id=tenant_id,
            chart_code=request.chart_code,
            code=request.code,
            name=request.name,
            account_type=request.account_type,
            parent_id=request.parent_id,
        )
        self.db.add(account)
        self.db.flush()

        self.audit.record(
            tenant_id, actor_id,
            entity_type="account",
            entity_id=account.id,
            action="account_created",
            details={
                "code": account.code,
                "name": account.name,
                "account_type": account.account_type.value,
                "chart_code": account.chart_code,
            },
        )
        logger.info("Created account %s (%s)", account.code, account.id)
        return account

    def get_account(self, tenant_id: uuid.UUID, account_id: uuid.UUID) -> Account:
        """Get an account by ID."""
        account = self.db.get(Account, account_id)
        if not account or account.tenant_id != tenant_id:
            raise NotFound(f"Account {account_id} not found")
        return account

    def get_by_code(
        self,
        tenant_id: uuid.UUID,
        code: str,
        chart_code: str = DEFAULT_CHART_CODE,
    ) -> Account | None:
        return self.db.execute(
            select(Account).where(
                Account.tenant_id == tenant_id,
                Account.chart_code == chart_code,
                Account.code == code,
            )
        ).scalar_one_or_none()

    def list_accounts(
        self,
        tenant_id: uuid.UUID,
        active_only: bool = False,
        chart_code: str = DEFAULT_CHART_CODE,
    ) -> list[Account]:
        """List the tenant's accounts ordered by code."""
        query = select(Account).where(
            Account.tenant_id == tenant_id,
            Account.chart_code == chart_code,
        )
        if active_only:
            query = query.where(Account.is_active.is_(True))
        accounts = self.db.execute(query.order_by(Account.code)).scalars().all()
        return list(accounts)

    def children_of(
        self, tenant_id: uuid.UUID, account_id: uuid.UUID
    ) -> list[Account]:
        parent = self.get_account(tenant_id, account_id)
        return sorted(parent.children, key=lambda a: a.code)

    def rename_account(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        account_id: uuid.UUID,
        request: AccountRename,
    ) -> Account:
        account = self.get_account(tenant_id, account_id)
        old_name = account.name
        account.name = request.name
        self.db.flush()

        self.audit.record(
            tenant_id, actor_id,
            entity_type="account",
            entity_id=account.id,
            action="account_renamed",
            details={"old_name": old_name, "new_name": account.name},
        )
        return account

    def deactivate_account(
        self, tenant_id: uuid.UUID, actor_id: uuid.UUID, account_id: uuid.UUID
    ) -> Account:
        """
        Stop new postings to an account.

        Existing lines and the account's balance are unaffected.
        """
        return self._set_active(
            tenant_id, actor_id, account_id, False, "account_deactivated"
        )

    def reactivate_account(
        self, tenant_id: uuid.UUID, actor_id: uuid.UUID, account_id: uuid.UUID
    ) -> Account:
        return self._set_active(
            tenant_id, actor_id, account_id, True, "account_reactivated"
        )

    def _set_active(
        self,
        tenant_id: uuid.UUID,
        actor_id: uuid.UUID,
        account_id: uuid.UUID,
        is_active: bool,
        action: str,
    ) -> Account:
        account = self.get_account(tenant_id, account_id)
        if account.is_active == is_active:
            state = "active" if is_active else "inactive"
            raise ValueError(f"Account {account.code} is already {state}")

        account.is_active = is_active
        self.db.flush()

        self.audit.record(
            tenant_id, actor_id,
            entity_type="account",
            entity_id=account.id,
            action=action,
            details={"code": account.code},
        )
        logger.info("Account %s: %s", account.code, action)
        return account
