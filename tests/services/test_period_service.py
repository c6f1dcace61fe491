"""
Tests for the PeriodService (accounting-period lock).
"""

from datetime import date

from erp_ledger.models import PeriodStatus
from erp_ledger.services.audit_logger import AuditLogger
from erp_ledger.services.period_service import PeriodService, period_bounds


class TestPeriodBounds:

    def test_month_bounds(self):
        assert period_bounds(date(2026, 2, 14)) == (
            date(2026, 2, 1), date(2026, 2, 28)
        )

    def test_leap_february(self):
        assert period_bounds(date(2028, 2, 1))[1] == date(2028, 2, 29)


class TestStatus:

    def test_month_without_row_is_open(self, db_session, tenant_id):
        service = PeriodService(db_session)
        assert service.status_for(tenant_id, date(2026, 3, 1)) == PeriodStatus.OPEN
        assert service.is_closed(tenant_id, date(2026, 3, 1)) is False

    def test_hard_close_blocks_whole_month(self, db_session, tenant_id, actor_id):
        service = PeriodService(db_session)
        service.close_period(tenant_id, actor_id, date(2026, 3, 17))
        db_session.commit()

        assert service.is_closed(tenant_id, date(2026, 3, 1))
        assert service.is_closed(tenant_id, date(2026, 3, 31))
        assert not service.is_closed(tenant_id, date(2026, 4, 1))

        check = service.check_posting_date(tenant_id, date(2026, 3, 5))
        assert check.allowed is False
        assert "March 2026" in check.message

    def test_soft_close_allows_with_warning(self, db_session, tenant_id, actor_id):
        service = PeriodService(db_session)
        service.close_period(tenant_id, actor_id, date(2026, 3, 17), soft=True)

        assert service.is_closed(tenant_id, date(2026, 3, 5)) is False
        check = service.check_posting_date(tenant_id, date(2026, 3, 5))
        assert check.allowed is True
        assert check.status == PeriodStatus.SOFT_CLOSED
        assert check.message

    def test_reopen(self, db_session, tenant_id, actor_id):
        service = PeriodService(db_session)
        service.close_period(tenant_id, actor_id, date(2026, 3, 17))
        period = service.reopen_period(tenant_id, actor_id, date(2026, 3, 2))
        db_session.commit()

        assert period.status == PeriodStatus.OPEN
        assert period.closed_at is None
        assert not service.is_closed(tenant_id, date(2026, 3, 17))

    def test_close_records_who_and_when(self, db_session, tenant_id, actor_id):
        period = PeriodService(db_session).close_period(
            tenant_id, actor_id, date(2026, 3, 17)
        )
        assert period.closed_by_actor_id == actor_id
        assert period.closed_at is not None
        assert period.period_start == date(2026, 3, 1)
        assert period.period_end == date(2026, 3, 31)


class TestListAndAudit:

    def test_list_periods_in_order(self, db_session, tenant_id, actor_id):
        service = PeriodService(db_session)
        service.close_period(tenant_id, actor_id, date(2026, 4, 1))
        service.close_period(tenant_id, actor_id, date(2026, 2, 1), soft=True)
        db_session.commit()

        periods = service.list_periods(tenant_id)
        assert [p.period_start for p in periods] == [
            date(2026, 2, 1), date(2026, 4, 1)
        ]

    def test_each_change_is_audited(self, db_session, tenant_id, actor_id):
        service = PeriodService(db_session)
        service.close_period(tenant_id, actor_id, date(2026, 3, 1), soft=True)
        service.close_period(tenant_id, actor_id, date(2026, 3, 1))
        service.reopen_period(tenant_id, actor_id, date(2026, 3, 1))
        db_session.commit()

        events = AuditLogger(db_session).list_events(
            tenant_id, entity_type="accounting_period"
        )
        assert [e.action for e in events] == [
            "period_soft_closed", "period_closed", "period_reopened"
        ]
        assert events[1].details == {
            "previous_status": "soft_closed",
            "new_status": "hard_closed",
        }
