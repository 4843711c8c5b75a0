"""
Validation utilities
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation

_AMOUNT_RE = re.compile(r"^\d+(\.\d{1,2})?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_CENTS = Decimal("0.01")

# Numeric(10, 2)
MAX_AMOUNT = Decimal("99999999.99")


def parse_amount(value: str | int | float | Decimal) -> Decimal:
    """
    Разобрать сумму операции

    Строка должна быть вида "123" или "123.45", число - положительным.
    Результат всегда в диапазоне (0, MAX_AMOUNT] и имеет 2 знака после запятой.

    Raises:
        ValueError: если сумма некорректна

    Example:
        >>> parse_amount("100.5")
        Decimal('100.50')
        >>> parse_amount(12)
        Decimal('12.00')
    """
    if isinstance(value, bool):
        raise ValueError("Неверный формат суммы")

    if isinstance(value, str):
        normalized = value.strip()
        if not _AMOUNT_RE.match(normalized):
            raise ValueError("Неверный формат суммы")
        amount = Decimal(normalized)
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValueError("Неверный формат суммы")
        if not amount.is_finite():
            raise ValueError("Неверный формат суммы")

    if amount <= 0:
        raise ValueError("Сумма должна быть больше нуля")
    # before quantize: huge values overflow the decimal context
    if amount > MAX_AMOUNT:
        raise ValueError("Сумма не может превышать 99 999 999.99")
    if amount != amount.quantize(_CENTS):
        raise ValueError("Максимум 2 знака после запятой")

    return amount.quantize(_CENTS)


def parse_calendar_date(value: str) -> date:
    """
    Разобрать дату формата YYYY-MM-DD

    Raises:
        ValueError: если формат неверный или такой даты нет в календаре
    """
    if not _DATE_RE.match(value):
        raise ValueError("Неверный формат даты (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError("Неверная дата")


def validate_email(value: str) -> str:
    """Check the email shape and return it stripped."""
    email = value.strip()
    if not _EMAIL_RE.match(email):
        raise ValueError("Неверный формат email")
    return email
