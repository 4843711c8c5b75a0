"""
Category use cases - user-defined categories for income and expenses
"""
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecofinance.application.errors import AccessDeniedError, EntityNotFoundError, ValidationError
from ecofinance.domain.category import DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON
from ecofinance.domain.transaction import TRANSACTION_TYPES
from ecofinance.infrastructure.db.models import Category


DUPLICATE_CATEGORY_MESSAGE = "Категория с таким названием уже существует"


class CategoryValidationError(ValidationError):
    pass


def find_user_category(db: Session, user_id: int, name: str) -> Category | None:
    return db.query(Category).filter(
        Category.user_id == user_id,
        Category.name == name,
    ).first()


class CreateCategoryUseCase:
    """Use case: Создать пользовательскую категорию"""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        name: str,
        category_type: str,
        color: str | None = None,
        icon: str | None = None,
        budget_limit: Decimal | None = None,
    ) -> Category:
        """
        Создать категорию

        Имя уникально в пределах пользователя (с учётом регистра).
        Тип задаётся один раз и больше не меняется.

        Raises:
            CategoryValidationError: пустое имя, неверный тип или дубликат
        """
        if not name:
            raise CategoryValidationError("Название категории обязательно")
        if category_type not in TRANSACTION_TYPES:
            raise CategoryValidationError(f"Неверный тип категории: {category_type}")

        if find_user_category(self.db, user_id, name):
            raise CategoryValidationError(DUPLICATE_CATEGORY_MESSAGE)

        category = Category(
            user_id=user_id,
            name=name,
            type=category_type,
            color=color or DEFAULT_CATEGORY_COLOR,
            icon=icon or DEFAULT_CATEGORY_ICON,
            budget_limit=budget_limit,
        )
        self.db.add(category)
        try:
            self.db.commit()
        except IntegrityError:
            # concurrent insert of the same name (uq_categories_user_name)
            self.db.rollback()
            raise CategoryValidationError(DUPLICATE_CATEGORY_MESSAGE)
        self.db.refresh(category)
        return category


class DeleteCategoryUseCase:
    """Use case: Удалить категорию. Операции с этой категорией не трогаются."""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, category_id: int, user_id: int) -> None:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise EntityNotFoundError("Категория не найдена")
        if category.user_id != user_id:
            raise AccessDeniedError("Доступ запрещен")

        self.db.delete(category)
        self.db.commit()


def list_user_categories(db: Session, user_id: int, category_type: str | None = None) -> list[Category]:
    query = db.query(Category).filter(Category.user_id == user_id)
    if category_type:
        query = query.filter(Category.type == category_type)
    return query.order_by(Category.name.asc()).all()
