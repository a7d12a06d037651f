"""Nutrient arithmetic: scaling, summation and achievement rates."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

_TWO_PLACES = Decimal("0.01")
_WHOLE = Decimal("1")

PROTEIN_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9
CARBOHYDRATE_KCAL_PER_G = 4


@dataclass(frozen=True)
class Nutrients:
    """Calories plus the three macronutrients."""

    calories: float
    protein: float
    fat: float
    carbohydrate: float

    @classmethod
    def zero(cls) -> "Nutrients":
        return cls(0.0, 0.0, 0.0, 0.0)

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "fat": self.fat,
            "carbohydrate": self.carbohydrate,
        }


@dataclass(frozen=True)
class PfcBalance:
    """Share of calories coming from protein, fat and carbohydrate."""

    protein: int
    fat: int
    carbohydrate: int


def round2(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(_to_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def scale_nutrients(per_serving: Nutrients, quantity: float) -> Nutrients:
    """Multiply per-serving values by a quantity, rounding each nutrient."""
    factor = _to_decimal(quantity)
    return Nutrients(
        calories=_scaled(per_serving.calories, factor),
        protein=_scaled(per_serving.protein, factor),
        fat=_scaled(per_serving.fat, factor),
        carbohydrate=_scaled(per_serving.carbohydrate, factor),
    )


def sum_nutrients(values: Iterable[Nutrients]) -> Nutrients:
    """Add already-rounded quadruples and round the sums once."""
    calories = protein = fat = carbohydrate = Decimal(0)
    for value in values:
        calories += _to_decimal(value.calories)
        protein += _to_decimal(value.protein)
        fat += _to_decimal(value.fat)
        carbohydrate += _to_decimal(value.carbohydrate)
    return Nutrients(
        calories=_quantize(calories),
        protein=_quantize(protein),
        fat=_quantize(fat),
        carbohydrate=_quantize(carbohydrate),
    )


def achievement_rate(actual: float, target: float) -> float:
    """Return the percentage of target reached, with one decimal place.

    Computed as ``round(actual / target * 1000) / 10``; a non-positive target
    yields 0.
    """
    if target <= 0:
        return 0.0
    permille = (_to_decimal(actual) / _to_decimal(target)) * 1000
    return float(permille.quantize(_WHOLE, rounding=ROUND_HALF_UP) / 10)


def achievement(actual: Nutrients, targets: Nutrients) -> Nutrients:
    """Apply :func:`achievement_rate` to each nutrient."""
    return Nutrients(
        calories=achievement_rate(actual.calories, targets.calories),
        protein=achievement_rate(actual.protein, targets.protein),
        fat=achievement_rate(actual.fat, targets.fat),
        carbohydrate=achievement_rate(actual.carbohydrate, targets.carbohydrate),
    )


def pfc_balance(protein: float, fat: float, carbohydrate: float) -> PfcBalance:
    """Return whole-percent calorie shares for protein, fat and carbohydrate."""
    protein_kcal = _to_decimal(protein) * PROTEIN_KCAL_PER_G
    fat_kcal = _to_decimal(fat) * FAT_KCAL_PER_G
    carbohydrate_kcal = _to_decimal(carbohydrate) * CARBOHYDRATE_KCAL_PER_G
    total = protein_kcal + fat_kcal + carbohydrate_kcal
    if total == 0:
        return PfcBalance(protein=0, fat=0, carbohydrate=0)
    return PfcBalance(
        protein=_percent(protein_kcal, total),
        fat=_percent(fat_kcal, total),
        carbohydrate=_percent(carbohydrate_kcal, total),
    )


def _to_decimal(value: float | int | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # repr keeps the shortest round-tripping form, so 1.005 stays 1.005
    return Decimal(repr(value)) if isinstance(value, float) else Decimal(value)


def _scaled(value: float, factor: Decimal) -> float:
    return _quantize(_to_decimal(value) * factor)


def _quantize(value: Decimal) -> float:
    return float(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def _percent(part: Decimal, total: Decimal) -> int:
    return int((part / total * 100).quantize(_WHOLE, rounding=ROUND_HALF_UP))
