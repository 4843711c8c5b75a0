"""
Category domain constants

Встроенные категории доступны всем пользователям, пользовательские
категории хранятся в таблице categories и дополняют этот список.
"""
from ecofinance.domain.transaction import TRANSACTION_TYPE_INCOME, TRANSACTION_TYPE_EXPENSE


DEFAULT_CATEGORY_COLOR = "#6366F1"
DEFAULT_CATEGORY_ICON = "💰"

# key -> label
BUILTIN_INCOME_CATEGORIES = {
    "salary": "Зарплата",
    "freelance": "Фриланс",
    "business": "Бизнес",
    "investment": "Инвестиции",
    "other": "Другое",
}

BUILTIN_EXPENSE_CATEGORIES = {
    "food": "Еда",
    "transport": "Транспорт",
    "utilities": "Коммунальные",
    "shopping": "Покупки",
    "entertainment": "Развлечения",
    "healthcare": "Здоровье",
    "education": "Образование",
    "other": "Другое",
}

BUILTIN_CATEGORIES = {
    TRANSACTION_TYPE_INCOME: BUILTIN_INCOME_CATEGORIES,
    TRANSACTION_TYPE_EXPENSE: BUILTIN_EXPENSE_CATEGORIES,
}


def list_builtin_categories(category_type: str | None = None) -> list[dict]:
    """
    Список встроенных категорий, опционально по типу.

    Returns:
        [{"value": "food", "label": "Еда", "type": "expense"}, ...]
    """
    types = [category_type] if category_type else list(BUILTIN_CATEGORIES)
    return [
        {"value": key, "label": label, "type": t}
        for t in types
        for key, label in BUILTIN_CATEGORIES[t].items()
    ]
