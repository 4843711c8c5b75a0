"""
Category API endpoints
"""
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_current_user
from ecofinance.api.schemas import CamelModel, Color, Icon, Name
from ecofinance.application.categories import (
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    list_user_categories,
)
from ecofinance.application.errors import AccessDeniedError, EntityNotFoundError, ValidationError
from ecofinance.domain.category import list_builtin_categories
from ecofinance.domain.transaction import TRANSACTION_TYPES
from ecofinance.infrastructure.db.models import User, Category
from ecofinance.utils.validation import MAX_AMOUNT


router = APIRouter(prefix="/api/categories", tags=["categories"])


# === Request/Response models ===

class CreateCategoryRequest(CamelModel):
    # Case-sensitive, unique per user
    name: Name
    type: Literal["income", "expense"]
    color: Color | None = None
    icon: Icon | None = None
    budget_limit: Decimal | None = None


class CategoryResponse(CamelModel):
    id: int
    user_id: int
    name: str
    type: str
    color: str
    icon: str
    budget_limit: str | None  # Decimal as string

    @classmethod
    def from_row(cls, c: Category) -> "CategoryResponse":
        return cls(
            id=c.id,
            user_id=c.user_id,
            name=c.name,
            type=c.type,
            color=c.color,
            icon=c.icon,
            budget_limit=str(c.budget_limit) if c.budget_limit is not None else None,
        )


class BuiltinCategoryResponse(CamelModel):
    value: str
    label: str
    type: str


# === Helper function ===

def _check_type_filter(category_type: str | None) -> None:
    if category_type and category_type not in TRANSACTION_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Неверный type: {category_type}. Используйте income или expense"
        )


# === Endpoints ===

@router.get("", response_model=list[CategoryResponse])
def list_categories(
    type: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Пользовательские категории, опционально по типу (income/expense)"""
    _check_type_filter(type)
    return [CategoryResponse.from_row(c) for c in list_user_categories(db, user.id, type)]


@router.get("/builtin", response_model=list[BuiltinCategoryResponse])
def list_builtin(
    type: str | None = None,
    user: User = Depends(get_current_user),
):
    """Встроенные категории (одинаковы для всех пользователей)"""
    _check_type_filter(type)
    return [BuiltinCategoryResponse(**c) for c in list_builtin_categories(type)]


@router.post("", response_model=CategoryResponse)
def create_category(
    req: CreateCategoryRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создать новую категорию"""
    if req.budget_limit is not None and req.budget_limit < 0:
        raise HTTPException(status_code=400, detail="Лимит бюджета не может быть отрицательным")
    if req.budget_limit is not None and req.budget_limit > MAX_AMOUNT:
        raise HTTPException(status_code=400, detail="Лимит бюджета не может превышать 99 999 999.99")

    try:
        category = CreateCategoryUseCase(db).execute(
            user_id=user.id,
            name=req.name,
            category_type=req.type,
            color=req.color,
            icon=req.icon,
            budget_limit=req.budget_limit,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CategoryResponse.from_row(category)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Удалить категорию (только свою)"""
    try:
        DeleteCategoryUseCase(db).execute(category_id=category_id, user_id=user.id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AccessDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return Response(status_code=204)
