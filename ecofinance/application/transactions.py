"""
Transaction use cases - business logic for transaction operations
"""
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from ecofinance.application.errors import AccessDeniedError, EntityNotFoundError, ValidationError
from ecofinance.domain.aggregation import month_window
from ecofinance.domain.eco_impact import estimate
from ecofinance.domain.transaction import TRANSACTION_TYPES
from ecofinance.infrastructure.db.models import Transaction
from ecofinance.utils.validation import MAX_AMOUNT


class TransactionValidationError(ValidationError):
    """Ошибка валидации транзакции"""
    pass


class CreateTransactionUseCase:
    """
    Use case: Создать операцию (income/expense)

    eco_impact считается здесь, один раз, и сохраняется вместе с операцией.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id: int,
        tx_type: str,
        amount: Decimal,
        category: str,
        occurred_on: date,
        description: str | None = None,
    ) -> Transaction:
        """
        Создать операцию

        Args:
            user_id: ID владельца
            tx_type: income или expense
            amount: Сумма (> 0, 2 знака)
            category: Ключ встроенной категории или имя пользовательской
            occurred_on: Календарная дата операции
            description: Описание (опционально)

        Returns:
            Созданная операция
        """
        if tx_type not in TRANSACTION_TYPES:
            raise TransactionValidationError(f"Неверный тип операции: {tx_type}")
        if amount <= 0:
            raise TransactionValidationError("Сумма операции должна быть больше нуля")
        if amount > MAX_AMOUNT:
            raise TransactionValidationError("Сумма операции не может превышать 99 999 999.99")
        if not category:
            raise TransactionValidationError("Выберите категорию")

        tx = Transaction(
            user_id=user_id,
            type=tx_type,
            amount=amount,
            category=category,
            description=description,
            date=occurred_on,
            eco_impact=estimate(category, amount),
        )
        self.db.add(tx)
        self.db.commit()
        self.db.refresh(tx)
        return tx


class DeleteTransactionUseCase:
    """Use case: Удалить операцию (безвозвратно)"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, transaction_id: int, user_id: int) -> None:
        """
        Raises:
            EntityNotFoundError: операции нет (в т.ч. уже удалена)
            AccessDeniedError: операция принадлежит другому пользователю
        """
        tx = self.db.query(Transaction).filter(Transaction.id == transaction_id).first()
        if not tx:
            raise EntityNotFoundError("Транзакция не найдена")
        if tx.user_id != user_id:
            raise AccessDeniedError("Доступ запрещен")

        self.db.delete(tx)
        self.db.commit()


def list_user_transactions(db: Session, user_id: int) -> list[Transaction]:
    """Операции пользователя, новые сверху"""
    return (
        db.query(Transaction)
        .filter(Transaction.user_id == user_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .all()
    )


def list_transactions_in_month(db: Session, user_id: int, year: int, month: int) -> list[Transaction]:
    """Операции пользователя за календарный месяц"""
    start, end = month_window(year, month)
    return (
        db.query(Transaction)
        .filter(
            Transaction.user_id == user_id,
            Transaction.date >= start,
            Transaction.date < end,
        )
        .all()
    )
