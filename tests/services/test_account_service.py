"""
Tests for the AccountService (chart of accounts).

Tests cover:
- Account creation and code uniqueness per tenant and chart
- Parent/child hierarchy
- Rename, deactivate, reactivate
- Audit events for every change
"""

import uuid

import pytest

from erp_ledger.exceptions import NotFound
from erp_ledger.models import AccountType
from erp_ledger.schemas.account import AccountCreate, AccountRename
from erp_ledger.services.account_service import AccountService
from erp_ledger.services.audit_logger import AuditLogger


def make_account(service, tenant_id, actor_id, code, name, account_type, **kwargs):
    return service.create_account(tenant_id, actor_id, AccountCreate(
        code=code, name=name, account_type=account_type, **kwargs
    ))


class TestCreateAccount:

    def test_create_account_succeeds(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        account = make_account(
            service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET
        )
        db_session.commit()

        assert account.id is not None
        assert account.code == "1000"
        assert account.account_type == AccountType.ASSET
        assert account.chart_code == "primary"
        assert account.is_active is True

    def test_duplicate_code_rejected(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        make_account(service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET)
        db_session.commit()

        with pytest.raises(ValueError, match="already exists"):
            make_account(
                service, tenant_id, actor_id, "1000", "Cash Again", AccountType.ASSET
            )

    def test_same_code_in_other_tenant_allowed(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        make_account(service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET)
        other = make_account(
            service, uuid.uuid4(), actor_id, "1000", "Cash", AccountType.ASSET
        )
        assert other.code == "1000"

    def test_same_code_in_other_chart_allowed(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        make_account(service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET)
        other = make_account(
            service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET,
            chart_code="statutory",
        )
        assert other.chart_code == "statutory"

    def test_creation_is_audited(self, db_session, tenant_id, actor_id):
        account = make_account(
            AccountService(db_session), tenant_id, actor_id,
            "4000", "Revenue", AccountType.INCOME,
        )
        events = AuditLogger(db_session).list_events(
            tenant_id, action="account_created"
        )
        assert events[0].entity_id == str(account.id)
        assert events[0].details["account_type"] == "income"


class TestHierarchy:

    def test_children_of(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        parent = make_account(
            service, tenant_id, actor_id, "1000", "Cash and Bank", AccountType.ASSET
        )
        make_account(
            service, tenant_id, actor_id, "1020", "Bank EUR", AccountType.ASSET,
            parent_id=parent.id,
        )
        make_account(
            service, tenant_id, actor_id, "1010", "Bank USD", AccountType.ASSET,
            parent_id=parent.id,
        )
        db_session.commit()

        children = service.children_of(tenant_id, parent.id)
        assert [c.code for c in children] == ["1010", "1020"]

    def test_parent_from_other_tenant_rejected(self, db_session, tenant_id, actor_id):
        service = AccountService(db_session)
        foreign = make_account(
            service, uuid.uuid4(), actor_id, "1000", "Cash", AccountType.ASSET
        )
        with pytest.raises(ValueError, match="not found"):
            make_account(
                service, tenant_id, actor_id, "1010", "Bank", AccountType.ASSET,
                parent_id=foreign.id,
            )


class TestLookup:

    def test_get_account_for_other_tenant_not_found(
        self, db_session, tenant_id, actor_id
    ):
        service = AccountService(db_session)
        account = make_account(
            service, tenant_id, actor_id, "1000", "Cash", AccountType.ASSET
        )
        with pytest.raises(NotFound):
            service.get_account(uuid.uuid4(), account.id)

    def test_get_by_code(self, db_session, chart, tenant_id):
        account = AccountService(db_session).get_by_code(tenant_id, "4000")
        assert account.id == chart["4000"]

    def test_list_accounts_ordered_by_code(self, db_session, chart, tenant_id):
        codes = [a.code for a in AccountService(db_session).list_accounts(tenant_id)]
        assert codes == sorted(codes)
        assert len(codes) == len(chart)


class TestLifecycle:

    def test_rename(self, db_session, chart, tenant_id, actor_id):
        service = AccountService(db_session)
        account = service.rename_account(
            tenant_id, actor_id, chart["4000"], AccountRename(name="Product Sales")
        )
        assert account.name == "Product Sales"

        event = AuditLogger(db_session).list_events(
            tenant_id, action="account_renamed"
        )[0]
        assert event.details == {"old_name": "Revenue", "new_name": "Product Sales"}

    def test_deactivate_and_reactivate(self, db_session, chart, tenant_id, actor_id):
        service = AccountService(db_session)
        service.deactivate_account(tenant_id, actor_id, chart["6000"])
        assert service.get_account(tenant_id, chart["6000"]).is_active is False
        assert chart["6000"] not in {
            a.id for a in service.list_accounts(tenant_id, active_only=True)
        }

        service.reactivate_account(tenant_id, actor_id, chart["6000"])
        assert service.get_account(tenant_id, chart["6000"]).is_active is True

        actions = [
            e.action for e in AuditLogger(db_session).list_events(
                tenant_id, entity_id=chart["6000"]
            )
        ]
        assert actions == [
            "account_created", "account_deactivated", "account_reactivated"
        ]

    def test_deactivate_twice_rejected(self, db_session, chart, tenant_id, actor_id):
        service = AccountService(db_session)
        service.deactivate_account(tenant_id, actor_id, chart["6000"])
        with pytest.raises(ValueError, match="already inactive"):
            service.deactivate_account(tenant_id, actor_id, chart["6000"])
