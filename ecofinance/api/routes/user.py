"""
User profile API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_current_user
from ecofinance.api.schemas import CamelModel, Email, MessageResponse, Name, Password, UserResponse
from ecofinance.application.accounts import ChangePasswordUseCase
from ecofinance.application.errors import ValidationError
from ecofinance.application.profile import ProfileService
from ecofinance.infrastructure.db.models import User


router = APIRouter(prefix="/api/user", tags=["user"])


# === Request/Response models ===

class UpdateProfileRequest(CamelModel):
    first_name: Name | None = None
    last_name: Name | None = None
    email: Email | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: Password


class UserStatsResponse(CamelModel):
    total_transactions: int
    account_age: int
    eco_rating: str


# === Endpoints ===

@router.get("/profile", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)):
    return UserResponse.from_user(user)


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    req: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Обновить имя, фамилию или email"""
    try:
        updated = ProfileService(db).update_profile(
            user_id=user.id,
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return UserResponse.from_user(updated)


@router.patch("/password", response_model=MessageResponse)
def change_password(
    req: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Сменить пароль (нужен текущий пароль)"""
    try:
        ChangePasswordUseCase(db).execute(
            user_id=user.id,
            current_password=req.current_password,
            new_password=req.new_password,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return MessageResponse(message="Пароль успешно изменен")


@router.get("/stats", response_model=UserStatsResponse)
def get_user_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Статистика за всё время: число операций, возраст аккаунта, эко-рейтинг"""
    stats = ProfileService(db).get_lifetime_stats(user.id)
    return UserStatsResponse(
        total_transactions=stats.total_transactions,
        account_age=stats.account_age,
        eco_rating=stats.eco_rating,
    )
