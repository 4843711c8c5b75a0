"""
Dashboard API endpoint
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_current_user
from ecofinance.api.schemas import CamelModel
from ecofinance.application.dashboard import DashboardService
from ecofinance.infrastructure.db.models import User


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


class DashboardStatsResponse(CamelModel):
    # Net of the current month (income - expenses), not a lifetime balance
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    eco_rating: str
    co2_reduction: int
    total_transactions: int


@router.get("/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Статистика за текущий календарный месяц"""
    stats = DashboardService(db).get_stats(user.id)
    return DashboardStatsResponse(
        total_balance=stats.total_balance,
        monthly_income=stats.monthly_income,
        monthly_expenses=stats.monthly_expenses,
        eco_rating=stats.eco_rating,
        co2_reduction=stats.co2_reduction,
        total_transactions=stats.total_transactions,
    )
