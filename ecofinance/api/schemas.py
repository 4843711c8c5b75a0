"""
Shared request/response models (camelCase on the wire)
"""
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ecofinance.infrastructure.db.models import User
from ecofinance.utils.validation import validate_email

MIN_PASSWORD_LENGTH = 6

# Column sizes (see infrastructure/db/models.py)
MAX_NAME_LENGTH = 255
MAX_COLOR_LENGTH = 20
MAX_ICON_LENGTH = 16


def check_password_length(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Пароль должен содержать минимум {MIN_PASSWORD_LENGTH} символов")
    return v


def check_not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Поле не может быть пустым")
    return v


def max_length(limit: int) -> AfterValidator:
    def check(v: str) -> str:
        if len(v) > limit:
            raise ValueError(f"Значение не может быть длиннее {limit} символов")
        return v
    return AfterValidator(check)


Email = Annotated[str, AfterValidator(validate_email), max_length(MAX_NAME_LENGTH)]
Password = Annotated[str, AfterValidator(check_password_length)]
NonBlankStr = Annotated[str, AfterValidator(check_not_blank)]
# Non-blank and fits a String(255) column
Name = Annotated[str, AfterValidator(check_not_blank), max_length(MAX_NAME_LENGTH)]
Color = Annotated[str, max_length(MAX_COLOR_LENGTH)]
Icon = Annotated[str, max_length(MAX_ICON_LENGTH)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserResponse(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
        )


class MessageResponse(CamelModel):
    message: str
