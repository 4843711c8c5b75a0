"""
Monthly report service: income/expense totals, top expense categories and
eco metrics for an explicit month.
"""
from sqlalchemy.orm import Session

from ecofinance.application.errors import ValidationError
from ecofinance.application.transactions import list_transactions_in_month
from ecofinance.domain.aggregation import MonthlyReport, build_monthly_report


class MonthlyReportService:
    """Build the monthly report for a (month, year) pair."""

    def __init__(self, db: Session):
        self.db = db

    def build(self, user_id: int, month: int, year: int) -> MonthlyReport:
        if not 1 <= month <= 12:
            raise ValidationError("Месяц должен быть от 1 до 12")
        if not 1 <= year <= 9998:
            raise ValidationError("Неверный год")

        rows = list_transactions_in_month(self.db, user_id, year, month)
        return build_monthly_report(rows, month, year)
