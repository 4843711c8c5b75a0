"""
Reports API endpoint
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_current_user
from ecofinance.api.schemas import CamelModel
from ecofinance.application.dashboard import server_today
from ecofinance.application.errors import ValidationError
from ecofinance.application.reports import MonthlyReportService
from ecofinance.infrastructure.db.models import User


router = APIRouter(prefix="/api/reports", tags=["reports"])


class CategoryShareResponse(CamelModel):
    category: str
    amount: float
    percentage: int


class EcoMetricsResponse(CamelModel):
    total_co2: float
    rating: str
    recommendations: list[str]


class MonthlyReportResponse(CamelModel):
    month: int
    year: int
    total_income: float
    total_expenses: float
    top_categories: list[CategoryShareResponse]
    eco_metrics: EcoMetricsResponse


def _int_or_none(value: str | None) -> int | None:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.get("/monthly", response_model=MonthlyReportResponse)
def get_monthly_report(
    month: str | None = None,
    year: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Отчёт за месяц

    Пустые или нечисловые month/year заменяются текущим месяцем/годом.
    """
    today = server_today()
    month_num = _int_or_none(month)
    year_num = _int_or_none(year)
    if month_num is None:
        month_num = today.month
    if year_num is None:
        year_num = today.year

    try:
        report = MonthlyReportService(db).build(user.id, month_num, year_num)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return MonthlyReportResponse(
        month=report.month,
        year=report.year,
        total_income=report.total_income,
        total_expenses=report.total_expenses,
        top_categories=[
            CategoryShareResponse(category=c.category, amount=c.amount, percentage=c.percentage)
            for c in report.top_categories
        ],
        eco_metrics=EcoMetricsResponse(
            total_co2=report.eco_metrics.total_co2,
            rating=report.eco_metrics.rating,
            recommendations=report.eco_metrics.recommendations,
        ),
    )
