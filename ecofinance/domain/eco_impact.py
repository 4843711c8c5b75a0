"""
Eco-impact heuristics: CO₂ estimate per transaction and the eco-rating ladder.

The estimate is a category-weighted fraction of the amount. It is computed
once when a transaction is created and stored on the row.
"""
from decimal import Decimal, ROUND_HALF_UP

_CO2_QUANT = Decimal("0.001")

# Fraction of the amount treated as CO₂-equivalent weight
ECO_MULTIPLIERS = {
    "transport": Decimal("0.20"),
    "food": Decimal("0.15"),
    "shopping": Decimal("0.10"),
    "utilities": Decimal("0.25"),
}
DEFAULT_ECO_MULTIPLIER = Decimal("0.05")

# (upper bound, exclusive) -> rating
_ECO_RATING_LADDER = [
    (Decimal("50"), "A+"),
    (Decimal("100"), "A"),
    (Decimal("200"), "B+"),
    (Decimal("300"), "B"),
    (Decimal("500"), "C+"),
]
_WORST_RATING = "C"

CO2_BASELINE = Decimal("500")

ECO_RECOMMENDATIONS = (
    "Выбирайте местные продукты для снижения углеродного следа",
    "Используйте общественный транспорт или велосипед",
    "Покупайте товары с экомаркировкой",
    "Сократите потребление мяса на 1-2 дня в неделю",
    "Выбирайте цифровые чеки вместо бумажных",
)


def estimate(category: str, amount: Decimal) -> Decimal:
    """
    Оценка CO₂-эквивалента операции.

    Args:
        category: ключ категории (встроенный или пользовательский)
        amount: сумма операции

    Returns:
        amount * multiplier, 3 знака после запятой

    Example:
        >>> estimate("transport", Decimal("100"))
        Decimal('20.000')
    """
    multiplier = ECO_MULTIPLIERS.get(category, DEFAULT_ECO_MULTIPLIER)
    return (Decimal(amount) * multiplier).quantize(_CO2_QUANT, rounding=ROUND_HALF_UP)


def classify_eco_rating(total_co2: Decimal) -> str:
    """Return the letter grade for a CO₂ total (strict less-than at each step)."""
    for threshold, rating in _ECO_RATING_LADDER:
        if total_co2 < threshold:
            return rating
    return _WORST_RATING


def co2_reduction(total_co2: Decimal) -> int:
    """Percentage below the 500 baseline, floored at 0."""
    percent = (CO2_BASELINE - Decimal(total_co2)) / CO2_BASELINE * 100
    return max(0, int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))
