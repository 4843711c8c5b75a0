"""
Tests for DashboardService, MonthlyReportService and ProfileService stats.
"""
import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import patch

from ecofinance.application.dashboard import DashboardService
from ecofinance.application.errors import EmailAlreadyRegisteredError, ValidationError
from ecofinance.application.profile import ProfileService
from ecofinance.application.reports import MonthlyReportService
from ecofinance.application.transactions import CreateTransactionUseCase
from ecofinance.infrastructure.db.models import Transaction

_D = Decimal
TODAY = date(2026, 10, 19)


def _add(db, user_id, tx_type, amount, category, on):
    return CreateTransactionUseCase(db).execute(
        user_id=user_id, tx_type=tx_type, amount=_D(amount), category=category, occurred_on=on,
    )


@pytest.fixture
def october(db_session, user, other_user):
    _add(db_session, user.id, "income", "3000", "salary", date(2026, 10, 1))
    _add(db_session, user.id, "expense", "100", "food", date(2026, 10, 5))
    _add(db_session, user.id, "expense", "100", "transport", date(2026, 10, 31))
    # outside the window / other owner
    _add(db_session, user.id, "expense", "999", "shopping", date(2026, 9, 30))
    _add(db_session, other_user.id, "expense", "500", "utilities", date(2026, 10, 10))


class TestDashboardService:
    def test_current_month_only(self, db_session, user, october):
        stats = DashboardService(db_session).get_stats(user.id, today=TODAY)

        assert stats.monthly_income == _D("3000")
        assert stats.monthly_expenses == _D("200")
        assert stats.total_balance == _D("2800")
        assert stats.total_transactions == 3
        # 150 + 15 + 20 = 185
        assert stats.eco_rating == "B+"
        assert stats.co2_reduction == 63

    def test_legacy_rows_without_eco_impact(self, db_session, user):
        db_session.add(Transaction(
            user_id=user.id, type="expense", amount=_D("40"), category="food",
            date=TODAY, eco_impact=None,
        ))
        db_session.commit()

        stats = DashboardService(db_session).get_stats(user.id, today=TODAY)
        assert stats.total_transactions == 1
        assert stats.eco_rating == "A+"
        assert stats.co2_reduction == 100


class TestMonthlyReportService:
    def test_report(self, db_session, user, october):
        report = MonthlyReportService(db_session).build(user.id, month=10, year=2026)

        assert report.total_income == _D("3000")
        assert report.total_expenses == _D("200")
        assert [(c.category, c.percentage) for c in report.top_categories] == [
            ("food", 50),
            ("transport", 50),
        ]
        assert report.eco_metrics.total_co2 == _D("185.000")
        assert len(report.eco_metrics.recommendations) == 5

    def test_empty_month(self, db_session, user, october):
        report = MonthlyReportService(db_session).build(user.id, month=2, year=2026)
        assert report.total_expenses == 0
        assert report.top_categories == []
        assert report.eco_metrics.rating == "A+"

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, db_session, user, month):
        with pytest.raises(ValidationError):
            MonthlyReportService(db_session).build(user.id, month=month, year=2026)


class TestProfileService:
    def test_lifetime_stats(self, db_session, user, october):
        now = datetime.now(timezone.utc) + timedelta(days=2, hours=1)
        stats = ProfileService(db_session).get_lifetime_stats(user.id, now=now)

        assert stats.total_transactions == 4
        assert stats.account_age == 2
        # 185 + 99.9 = 284.9
        assert stats.eco_rating == "B"

    def test_update_profile(self, db_session, user):
        updated = ProfileService(db_session).update_profile(user.id, first_name="Мария")
        assert updated.first_name == "Мария"
        assert updated.last_name == "Иванова"
        assert updated.email == "anna@example.com"

    def test_update_email_taken(self, db_session, user, other_user):
        with pytest.raises(EmailAlreadyRegisteredError):
            ProfileService(db_session).update_profile(user.id, email=other_user.email)

    def test_concurrent_email_change_is_a_validation_error(self, db_session, user, other_user):
        with patch("ecofinance.application.profile.get_user_by_email", return_value=None):
            with pytest.raises(EmailAlreadyRegisteredError):
                ProfileService(db_session).update_profile(user.id, email=other_user.email)

        db_session.refresh(user)
        assert user.email == "anna@example.com"
