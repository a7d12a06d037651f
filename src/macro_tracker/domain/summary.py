"""Domain models for daily and monthly summaries."""

from dataclasses import dataclass
from datetime import date

from macro_tracker.domain.meals import MealType
from macro_tracker.domain.nutrition import Nutrients


@dataclass(frozen=True)
class DailySummary:
    """Totals for one day against the user's targets."""

    day: date
    totals: Nutrients
    targets: Nutrients
    achievement: Nutrients
    by_meal_type: dict[MealType, Nutrients]


@dataclass(frozen=True)
class DayTotals:
    """Summed nutrients for one calendar day of a month."""

    day: date
    nutrients: Nutrients
    has_records: bool


@dataclass(frozen=True)
class MonthlySummary:
    """Per-day totals for a month with the average over logged days."""

    year: int
    month: int
    targets: Nutrients
    days: list[DayTotals]
    monthly_average: Nutrients

    @property
    def days_with_records(self) -> int:
        return sum(1 for day in self.days if day.has_records)
