"""
Profile service: user profile data and lifetime statistics.
"""
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ecofinance.application.errors import EMAIL_TAKEN_MESSAGE, EmailAlreadyRegisteredError, EntityNotFoundError
from ecofinance.auth import get_user_by_email
from ecofinance.domain.aggregation import LifetimeStats, build_lifetime_stats
from ecofinance.infrastructure.db.models import User, Transaction


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def _get_user(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise EntityNotFoundError("Пользователь не найден")
        return user

    def get_profile(self, user_id: int) -> User:
        return self._get_user(user_id)

    def update_profile(
        self,
        user_id: int,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
    ) -> User:
        """Update the given fields; None means "leave as is"."""
        user = self._get_user(user_id)

        if email is not None and email != user.email:
            other = get_user_by_email(self.db, email)
            if other and other.id != user.id:
                raise EmailAlreadyRegisteredError(EMAIL_TAKEN_MESSAGE)
            user.email = email
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name

        user.updated_at = datetime.now(timezone.utc)
        try:
            self.db.commit()
        except IntegrityError:
            # email taken by a concurrent request (users.email is unique)
            self.db.rollback()
            raise EmailAlreadyRegisteredError(EMAIL_TAKEN_MESSAGE)
        self.db.refresh(user)
        return user

    def get_lifetime_stats(self, user_id: int, now: datetime | None = None) -> LifetimeStats:
        """Return stats over all transactions ever recorded by the user."""
        user = self._get_user(user_id)
        rows = self.db.query(Transaction).filter(Transaction.user_id == user_id).all()
        return build_lifetime_stats(rows, user.created_at, now or datetime.now(timezone.utc))
