"""
Aggregation engine: dashboard statistics, lifetime statistics and monthly
reports over a set of transaction rows.

All functions are pure. Rows only need the attributes ``type``, ``amount``,
``category`` and ``eco_impact`` (``None`` counts as zero), so both ORM rows
and plain objects work.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence, Tuple

from ecofinance.domain.eco_impact import (
    ECO_RECOMMENDATIONS,
    classify_eco_rating,
    co2_reduction,
)
from ecofinance.domain.transaction import TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE

_ZERO = Decimal("0")
TOP_CATEGORIES_LIMIT = 6


@dataclass(frozen=True)
class DashboardStats:
    # Net of the current month only, not a running lifetime balance
    total_balance: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    total_transactions: int
    eco_rating: str
    co2_reduction: int


@dataclass(frozen=True)
class LifetimeStats:
    total_transactions: int
    account_age: int
    eco_rating: str


@dataclass(frozen=True)
class CategoryShare:
    category: str
    amount: Decimal
    percentage: int


@dataclass(frozen=True)
class EcoMetrics:
    total_co2: Decimal
    rating: str
    recommendations: List[str] = field(default_factory=lambda: list(ECO_RECOMMENDATIONS))


@dataclass(frozen=True)
class MonthlyReport:
    month: int
    year: int
    total_income: Decimal
    total_expenses: Decimal
    top_categories: List[CategoryShare]
    eco_metrics: EcoMetrics


def month_window(year: int, month: int) -> Tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    start = date(year, month, 1)
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


def _sum_amounts(rows: Iterable, tx_type: str) -> Decimal:
    return sum((Decimal(r.amount) for r in rows if r.type == tx_type), _ZERO)


def total_co2(rows: Iterable) -> Decimal:
    """Sum of stored eco-impact values; legacy rows without one count as 0."""
    return sum((Decimal(r.eco_impact) for r in rows if r.eco_impact is not None), _ZERO)


def _percentage(part: Decimal, whole: Decimal) -> int:
    if whole == _ZERO:
        return 0
    return int((part / whole * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rank_expense_categories(
    rows: Sequence,
    limit: int = TOP_CATEGORIES_LIMIT,
) -> List[CategoryShare]:
    """
    Expense categories ranked by amount (desc), ties by category name (asc).

    Percentages are shares of the total expenses of ``rows``; a zero total
    yields 0% instead of dividing.
    """
    by_category = defaultdict(lambda: _ZERO)
    for r in rows:
        if r.type == TRANSACTION_TYPE_EXPENSE:
            by_category[r.category] += Decimal(r.amount)

    total_expenses = sum(by_category.values(), _ZERO)
    ranked = sorted(by_category.items(), key=lambda item: (-item[1], item[0]))

    return [
        CategoryShare(
            category=category,
            amount=amount,
            percentage=_percentage(amount, total_expenses),
        )
        for category, amount in ranked[:limit]
    ]


def build_dashboard_stats(month_rows: Sequence) -> DashboardStats:
    """
    Dashboard numbers for the rows of the current calendar month.

    Caller is responsible for filtering ``month_rows`` to that window.
    """
    income = _sum_amounts(month_rows, TRANSACTION_TYPE_INCOME)
    expenses = _sum_amounts(month_rows, TRANSACTION_TYPE_EXPENSE)
    co2 = total_co2(month_rows)

    return DashboardStats(
        total_balance=income - expenses,
        monthly_income=income,
        monthly_expenses=expenses,
        total_transactions=len(month_rows),
        eco_rating=classify_eco_rating(co2),
        co2_reduction=co2_reduction(co2),
    )


def compute_account_age_days(created_at: datetime, now: datetime) -> int:
    """Whole days elapsed since ``created_at``; naive datetimes are taken as UTC."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max((now - created_at) // timedelta(days=1), 0)


def build_lifetime_stats(all_rows: Sequence, created_at: datetime, now: datetime) -> LifetimeStats:
    """Stats over every transaction of the user; rating uses the lifetime CO₂ sum."""
    return LifetimeStats(
        total_transactions=len(all_rows),
        account_age=compute_account_age_days(created_at, now),
        eco_rating=classify_eco_rating(total_co2(all_rows)),
    )


def build_monthly_report(month_rows: Sequence, month: int, year: int) -> MonthlyReport:
    co2 = total_co2(month_rows)
    return MonthlyReport(
        month=month,
        year=year,
        total_income=_sum_amounts(month_rows, TRANSACTION_TYPE_INCOME),
        total_expenses=_sum_amounts(month_rows, TRANSACTION_TYPE_EXPENSE),
        top_categories=rank_expense_categories(month_rows),
        eco_metrics=EcoMetrics(total_co2=co2, rating=classify_eco_rating(co2)),
    )
