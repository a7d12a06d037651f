"""Daily and monthly nutrient summaries."""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta

from macro_tracker.domain.meals import MealRecord, MealType
from macro_tracker.domain.nutrition import (
    Nutrients,
    achievement,
    round2,
    sum_nutrients,
)
from macro_tracker.domain.summary import DailySummary, DayTotals, MonthlySummary
from macro_tracker.errors import NotFound
from macro_tracker.services.meals import MealRepository
from macro_tracker.services.users import UserRepository


@dataclass
class SummaryService:
    """Aggregates stored meal item snapshots against user targets."""

    meal_repository: MealRepository
    user_repository: UserRepository

    def daily(self, user_id: int, day: date) -> DailySummary:
        """Return totals, per-meal-type totals and achievement for a day."""
        targets = self._targets(user_id)
        meals = self.meal_repository.list_meals_between(
            user_id, day, day + timedelta(days=1)
        )
        by_meal_type = _bucket_by_meal_type(meals)
        totals = sum_nutrients(by_meal_type.values())
        return DailySummary(
            day=day,
            totals=totals,
            targets=targets,
            achievement=achievement(totals, targets),
            by_meal_type=by_meal_type,
        )

    def monthly(self, user_id: int, year: int, month: int) -> MonthlySummary:
        """Return one entry per day of the month and the logged-day average."""
        targets = self._targets(user_id)
        start, end = month_range(year, month)
        meals = self.meal_repository.list_meals_between(user_id, start, end)
        per_day = _bucket_by_day(meals)

        days: list[DayTotals] = []
        logged: list[Nutrients] = []
        for offset in range((end - start).days):
            day = start + timedelta(days=offset)
            totals = per_day.get(day)
            if totals is not None:
                logged.append(totals)
            days.append(
                DayTotals(
                    day=day,
                    nutrients=_round_each(totals or Nutrients.zero()),
                    has_records=totals is not None,
                )
            )

        return MonthlySummary(
            year=year,
            month=month,
            targets=targets,
            days=days,
            monthly_average=_average(logged),
        )

    def _targets(self, user_id: int) -> Nutrients:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user.targets.as_nutrients()


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return the first day of the month and of the following month."""
    start = date(year, month, 1)
    _, days_in_month = calendar.monthrange(year, month)
    return start, start + timedelta(days=days_in_month)


def _bucket_by_meal_type(meals: list[MealRecord]) -> dict[MealType, Nutrients]:
    grouped: dict[MealType, list[Nutrients]] = {meal_type: [] for meal_type in MealType}
    for meal in meals:
        grouped[meal.meal_type].append(meal.totals)
    return {
        meal_type: sum_nutrients(totals) for meal_type, totals in grouped.items()
    }


def _bucket_by_day(meals: list[MealRecord]) -> dict[date, Nutrients]:
    per_day: dict[date, Nutrients] = {}
    for meal in meals:
        current = per_day.get(meal.record_date, Nutrients.zero())
        per_day[meal.record_date] = _add(current, meal.totals)
    return per_day


def _add(left: Nutrients, right: Nutrients) -> Nutrients:
    return Nutrients(
        calories=left.calories + right.calories,
        protein=left.protein + right.protein,
        fat=left.fat + right.fat,
        carbohydrate=left.carbohydrate + right.carbohydrate,
    )


def _round_each(value: Nutrients) -> Nutrients:
    return Nutrients(
        calories=round2(value.calories),
        protein=round2(value.protein),
        fat=round2(value.fat),
        carbohydrate=round2(value.carbohydrate),
    )


def _average(days: list[Nutrients]) -> Nutrients:
    if not days:
        return Nutrients.zero()
    count = len(days)
    total = Nutrients.zero()
    for day in days:
        total = _add(total, day)
    return Nutrients(
        calories=round2(total.calories / count),
        protein=round2(total.protein / count),
        fat=round2(total.fat / count),
        carbohydrate=round2(total.carbohydrate / count),
    )
