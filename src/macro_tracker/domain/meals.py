"""Domain models for meal records."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from macro_tracker.domain.nutrition import Nutrients, sum_nutrients


class MealType(StrEnum):
    """Meal slots within a day, in display order."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"

    @property
    def position(self) -> int:
        return list(MealType).index(self)


@dataclass(frozen=True)
class MealItemFood:
    """Food reference embedded in a meal item."""

    id: int
    name: str
    serving_unit: str
    per_serving: Nutrients | None = None
    serving_size: float | None = None


@dataclass(frozen=True)
class MealItemDraft:
    """A meal item ready to persist, with its nutrient snapshot."""

    food_id: int
    quantity: float
    nutrients: Nutrients


@dataclass(frozen=True)
class MealItemRecord:
    """Persisted meal item with its frozen nutrient snapshot."""

    id: int
    food: MealItemFood
    quantity: float
    nutrients: Nutrients


@dataclass(frozen=True)
class MealRecord:
    """A logged meal with its items."""

    id: int
    user_id: int
    record_date: date
    meal_type: MealType
    memo: str | None
    items: list[MealItemRecord]
    created_at: datetime
    updated_at: datetime

    @property
    def totals(self) -> Nutrients:
        return sum_nutrients(item.nutrients for item in self.items)


@dataclass(frozen=True)
class MealFilter:
    """Criteria for listing meal records."""

    on_date: date | None = None
    start_date: date | None = None
    end_date: date | None = None
    meal_type: MealType | None = None
