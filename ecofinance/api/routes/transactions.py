"""
Transaction API endpoints
"""
import datetime as dt
from decimal import Decimal
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BeforeValidator
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_current_user
from ecofinance.api.schemas import CamelModel, Name
from ecofinance.application.errors import AccessDeniedError, EntityNotFoundError, ValidationError
from ecofinance.application.transactions import (
    CreateTransactionUseCase,
    DeleteTransactionUseCase,
    list_user_transactions,
)
from ecofinance.infrastructure.db.models import User, Transaction
from ecofinance.utils.validation import parse_amount, parse_calendar_date


router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _parse_date_field(value):
    if not isinstance(value, str):
        raise ValueError("Неверный формат даты (YYYY-MM-DD)")
    return parse_calendar_date(value)


# === Request/Response models ===

class CreateTransactionRequest(CamelModel):
    type: Literal["income", "expense"]
    # "123.45" or a positive number
    amount: Annotated[Decimal, BeforeValidator(parse_amount)]
    category: Name
    description: str | None = None
    date: Annotated[dt.date, BeforeValidator(_parse_date_field)]


class TransactionResponse(CamelModel):
    id: int
    user_id: int
    type: str
    amount: str  # Decimal as string
    category: str
    description: str | None
    date: dt.date
    eco_impact: str | None  # Decimal as string
    created_at: dt.datetime

    @classmethod
    def from_row(cls, tx: Transaction) -> "TransactionResponse":
        return cls(
            id=tx.id,
            user_id=tx.user_id,
            type=tx.type,
            amount=str(tx.amount),
            category=tx.category,
            description=tx.description,
            date=tx.date,
            eco_impact=str(tx.eco_impact) if tx.eco_impact is not None else None,
            created_at=tx.created_at,
        )


# === Endpoints ===

@router.get("", response_model=list[TransactionResponse])
def list_transactions(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Все операции пользователя (новые сверху)"""
    return [TransactionResponse.from_row(tx) for tx in list_user_transactions(db, user.id)]


@router.post("", response_model=TransactionResponse)
def create_transaction(
    req: CreateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создать операцию; eco_impact считается и сохраняется сразу"""
    try:
        tx = CreateTransactionUseCase(db).execute(
            user_id=user.id,
            tx_type=req.type,
            amount=req.amount,
            category=req.category,
            occurred_on=req.date,
            description=req.description,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TransactionResponse.from_row(tx)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Удалить операцию (только свою)"""
    try:
        DeleteTransactionUseCase(db).execute(transaction_id=transaction_id, user_id=user.id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AccessDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))

    return Response(status_code=204)
