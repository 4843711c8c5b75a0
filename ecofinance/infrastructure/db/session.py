"""
Engine, sessions and the readiness probe for the EcoFinance database
"""
import psycopg
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from ecofinance.config import get_settings


class Base(DeclarativeBase):
    pass


# Created on first use so that importing models never needs DATABASE_URL
_engine = None
_SessionLocal = None


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().get_sqlalchemy_url(), pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """Один Session на запрос; закрывается после ответа (tests override this)."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    SELECT 1 через psycopg напрямую, минуя пул SQLAlchemy (используется в /ready)

    Raises:
        psycopg.OperationalError: БД недоступна
    """
    dsn = get_settings().DATABASE_URL.replace("postgresql+psycopg://", "postgresql://", 1)
    with psycopg.connect(dsn, connect_timeout=3) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
            cur.fetchone()
