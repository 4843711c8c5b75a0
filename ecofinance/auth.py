import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ecofinance.config import get_settings
from ecofinance.infrastructure.db.models import User

# pbkdf2_sha256: primary (no native deps)
# bcrypt: accepted for hashes imported from the previous backend
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])


class InvalidTokenError(Exception):
    """Bearer token is malformed, expired or has a bad signature"""
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_access_token(user: User, now: datetime | None = None) -> str:
    """Signed JWT bound to the user id, valid for ACCESS_TOKEN_EXPIRE_DAYS."""
    settings = get_settings()
    now = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "iat": now,
        "exp": now + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Validate a bearer token and return the user id it carries

    Raises:
        InvalidTokenError: bad signature, expired, or no usable subject
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTokenError("Token has no valid subject") from e


def generate_reset_token() -> tuple[str, str]:
    """Return (plain token for the email, sha256 hash for the database)."""
    token = secrets.token_hex(32)
    return token, hash_reset_token(token)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
