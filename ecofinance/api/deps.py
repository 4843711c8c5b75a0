"""
FastAPI dependencies (DB session, authentication, email)
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ecofinance.auth import InvalidTokenError, decode_access_token
from ecofinance.application.email_service import EmailSender, create_email_sender
from ecofinance.config import get_settings
from ecofinance.infrastructure.db.session import get_db as _get_db
from ecofinance.infrastructure.db.models import User


# Re-export get_db для удобства
get_db = _get_db

_bearer = HTTPBearer(auto_error=False)


def get_email_sender() -> EmailSender:
    """
    Email collaborator for handlers (override in tests via dependency_overrides)
    """
    return create_email_sender(get_settings())


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    """
    Получить текущего пользователя по bearer-токену

    Raises:
        HTTPException(401): заголовка Authorization нет
        HTTPException(403): токен недействителен, истёк или пользователь удалён

    Usage:
        @router.get("/profile")
        def get_profile(user: User = Depends(get_current_user)):
            ...
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Токен доступа отсутствует"
        )

    try:
        user_id = decode_access_token(credentials.credentials)
    except InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Недействительный токен"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Недействительный токен"
        )

    return user
