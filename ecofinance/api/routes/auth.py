"""
Authentication routes (register, login, password recovery)
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ecofinance.api.deps import get_db, get_email_sender
from ecofinance.api.schemas import CamelModel, Email, MessageResponse, Name, NonBlankStr, Password, UserResponse
from ecofinance.auth import create_access_token
from ecofinance.application.accounts import (
    AuthenticateUserUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from ecofinance.application.email_service import EmailSender
from ecofinance.application.errors import InvalidCredentialsError, ValidationError


router = APIRouter(prefix="/api/auth", tags=["auth"])

PASSWORD_RESET_MESSAGE = (
    "Если аккаунт с таким email существует, инструкции по восстановлению пароля отправлены на него"
)


# === Request/Response models ===

class RegisterRequest(CamelModel):
    email: Email
    password: Password
    first_name: Name
    last_name: Name


class LoginRequest(CamelModel):
    email: Email
    password: Password


class ForgotPasswordRequest(CamelModel):
    email: Email


class ResetPasswordRequest(CamelModel):
    token: NonBlankStr
    new_password: Password


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


# === Endpoints ===

@router.post("/register", response_model=AuthResponse)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """Регистрация: создать аккаунт и сразу выдать токен"""
    try:
        user = RegisterUserUseCase(db, email_sender).execute(
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AuthResponse(token=create_access_token(user), user=UserResponse.from_user(user))


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    """Вход по email и паролю"""
    try:
        user = AuthenticateUserUseCase(db).execute(email=req.email, password=req.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    return AuthResponse(token=create_access_token(user), user=UserResponse.from_user(user))


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    req: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
):
    """Отправить ссылку для сброса пароля. Ответ одинаковый для любого email."""
    RequestPasswordResetUseCase(db, email_sender).execute(email=req.email)
    return MessageResponse(message=PASSWORD_RESET_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(req: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Установить новый пароль по токену из письма"""
    try:
        ResetPasswordUseCase(db).execute(token=req.token, new_password=req.new_password)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return MessageResponse(message="Пароль успешно изменен")
