"""
Dashboard service: statistics for the current calendar month.

"Current" is defined by the server clock in the configured TIMEZONE.
Note that total_balance is the net of this month only, not a running
lifetime balance.
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from ecofinance.application.transactions import list_transactions_in_month
from ecofinance.config import get_settings
from ecofinance.domain.aggregation import DashboardStats, build_dashboard_stats


def server_today() -> date:
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).date()


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_stats(self, user_id: int, today: date | None = None) -> DashboardStats:
        today = today or server_today()
        rows = list_transactions_in_month(self.db, user_id, today.year, today.month)
        return build_dashboard_stats(rows)
