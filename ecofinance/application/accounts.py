"""
Account use cases: registration, login, password change and password reset
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecofinance.auth import (
    hash_password,
    verify_password,
    get_user_by_email,
    generate_reset_token,
    hash_reset_token,
)
from ecofinance.application.email_service import EmailSender
from ecofinance.application.errors import (
    EMAIL_TAKEN_MESSAGE,
    EmailAlreadyRegisteredError,
    EntityNotFoundError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidResetTokenError,
)
from ecofinance.config import get_settings
from ecofinance.infrastructure.db.models import User, PasswordResetToken

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes; everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RegisterUserUseCase:
    """Use case: Регистрация нового пользователя"""

    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender

    def execute(self, email: str, password: str, first_name: str, last_name: str) -> User:
        """
        Создать пользователя

        Raises:
            EmailAlreadyRegisteredError: email уже зарегистрирован
        """
        if get_user_by_email(self.db, email):
            raise EmailAlreadyRegisteredError(EMAIL_TAKEN_MESSAGE)

        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # registered concurrently (users.email is unique)
            self.db.rollback()
            raise EmailAlreadyRegisteredError(EMAIL_TAKEN_MESSAGE)
        self.db.refresh(user)

        logger.info("User registered: user_id=%d", user.id)
        self.email_sender.send_welcome_email(user.email, user.first_name, get_settings().FRONTEND_URL)
        return user


class AuthenticateUserUseCase:
    """Use case: Вход по email и паролю"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, email: str, password: str) -> User:
        """
        Raises:
            InvalidCredentialsError: одинаково для неизвестного email и неверного пароля
        """
        user = get_user_by_email(self.db, email)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Неверный email или пароль")
        return user


class ChangePasswordUseCase:
    """Use case: Смена пароля с проверкой текущего"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise EntityNotFoundError("Пользователь не найден")

        if not verify_password(current_password, user.password_hash):
            raise InvalidCurrentPasswordError("Неверный текущий пароль")

        user.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info("Password changed: user_id=%d", user_id)


class RequestPasswordResetUseCase:
    """
    Use case: Запрос на восстановление пароля

    Ответ не зависит от того, существует ли пользователь: для неизвестного
    email ничего не происходит, для известного сохраняется хеш токена и
    отправляется письмо со ссылкой.
    """

    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender

    def execute(self, email: str, now: datetime | None = None) -> None:
        user = get_user_by_email(self.db, email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return

        settings = get_settings()
        now = now or datetime.now(timezone.utc)
        token, token_hash = generate_reset_token()

        self.db.add(PasswordResetToken(
            user_id=user.id,
            token_hash=token_hash,
            expires_at=now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_TTL_MINUTES),
        ))
        self.db.commit()

        sent = self.email_sender.send_password_reset_email(user.email, token, settings.FRONTEND_URL)
        logger.info("Password reset requested: user_id=%d email_sent=%s", user.id, sent)


class ResetPasswordUseCase:
    """Use case: Установить новый пароль по одноразовому токену из письма"""

    def __init__(self, db: Session):
        self.db = db

    def execute(self, token: str, new_password: str, now: datetime | None = None) -> None:
        """
        Raises:
            InvalidResetTokenError: токен не найден, истёк или уже использован
        """
        now = now or datetime.now(timezone.utc)

        reset = self.db.query(PasswordResetToken).filter(
            PasswordResetToken.token_hash == hash_reset_token(token)
        ).first()

        if not reset or reset.used_at is not None or _as_utc(reset.expires_at) <= now:
            raise InvalidResetTokenError("Ссылка для восстановления пароля недействительна или устарела")

        user = self.db.query(User).filter(User.id == reset.user_id).first()
        if not user:
            raise InvalidResetTokenError("Ссылка для восстановления пароля недействительна или устарела")

        user.password_hash = hash_password(new_password)
        reset.used_at = now
        self.db.commit()
        logger.info("Password reset completed: user_id=%d", user.id)
