"""Tests for daily and monthly summaries."""

from datetime import date

import pytest

from macro_tracker.domain.meals import MealItemDraft, MealType
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.errors import NotFound
from macro_tracker.services.summary import SummaryService, month_range
from tests.conftest import (
    InMemoryDatabase,
    InMemoryFoodRepository,
    InMemoryMealRepository,
    InMemoryUserRepository,
)


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def user_id(database: InMemoryDatabase) -> int:
    return InMemoryUserRepository(database).create_user("Alice", "a@mail.com", "x").id


@pytest.fixture
def food_id(database: InMemoryDatabase) -> int:
    food = InMemoryFoodRepository(database).add_food("Any", Nutrients.zero())
    return food.id


@pytest.fixture
def meals(database: InMemoryDatabase) -> InMemoryMealRepository:
    return InMemoryMealRepository(database)


@pytest.fixture
def service(
    database: InMemoryDatabase, meals: InMemoryMealRepository
) -> SummaryService:
    return SummaryService(meals, InMemoryUserRepository(database))


def _log(  # noqa: PLR0913
    meals: InMemoryMealRepository,
    user_id: int,
    food_id: int,
    day: date,
    meal_type: MealType,
    *snapshots: Nutrients,
) -> None:
    meals.create_meal(
        user_id,
        day,
        meal_type,
        None,
        [MealItemDraft(food_id=food_id, quantity=1, nutrients=n) for n in snapshots],
    )


def test_daily_summary_buckets_by_meal_type(
    service: SummaryService,
    meals: InMemoryMealRepository,
    user_id: int,
    food_id: int,
) -> None:
    day = date(2025, 6, 1)
    _log(
        meals,
        user_id,
        food_id,
        day,
        MealType.BREAKFAST,
        Nutrients(270, 4, 0.5, 59),
        Nutrients(150, 12, 11, 0.5),
    )
    dinner = Nutrients(580, 44, 43.5, 240.5)
    _log(meals, user_id, food_id, day, MealType.DINNER, dinner)
    next_day = date(2025, 6, 2)
    _log(meals, user_id, food_id, next_day, MealType.LUNCH, Nutrients(999, 1, 1, 1))

    summary = service.daily(user_id, day)

    assert summary.by_meal_type[MealType.BREAKFAST] == Nutrients(420, 16, 11.5, 59.5)
    assert summary.by_meal_type[MealType.LUNCH] == Nutrients.zero()
    assert summary.totals == Nutrients(1000, 60, 55, 300)
    assert summary.targets == Nutrients(2000, 60, 55, 300)
    assert summary.achievement == Nutrients(50.0, 100.0, 100.0, 100.0)


def test_daily_summary_without_records_is_zero(
    service: SummaryService, user_id: int
) -> None:
    summary = service.daily(user_id, date(2025, 6, 1))

    assert summary.totals == Nutrients.zero()
    assert summary.achievement == Nutrients.zero()
    assert set(summary.by_meal_type) == set(MealType)


def test_daily_summary_for_unknown_user(service: SummaryService) -> None:
    with pytest.raises(NotFound):
        service.daily(404, date(2025, 6, 1))


def test_monthly_average_only_counts_logged_days(
    service: SummaryService,
    meals: InMemoryMealRepository,
    user_id: int,
    food_id: int,
) -> None:
    for day, snapshot in [
        (date(2023, 2, 1), Nutrients(100, 10, 5, 30)),
        (date(2023, 2, 14), Nutrients(200, 20, 10, 30)),
        (date(2023, 2, 28), Nutrients(300, 30, 15, 30)),
    ]:
        _log(meals, user_id, food_id, day, MealType.LUNCH, snapshot)
    march = date(2023, 3, 1)
    _log(meals, user_id, food_id, march, MealType.LUNCH, Nutrients(9, 9, 9, 9))

    summary = service.monthly(user_id, 2023, 2)

    assert len(summary.days) == 28
    assert summary.days_with_records == 3
    assert summary.monthly_average == Nutrients(200, 20, 10, 30)
    empty_days = [day for day in summary.days if not day.has_records]
    assert len(empty_days) == 25
    assert all(day.nutrients == Nutrients.zero() for day in empty_days)


def test_monthly_calories_are_conserved(
    service: SummaryService,
    meals: InMemoryMealRepository,
    user_id: int,
    food_id: int,
) -> None:
    snapshots = [Nutrients(120.25, 1, 1, 1), Nutrients(80.5, 1, 1, 1)]
    _log(meals, user_id, food_id, date(2025, 1, 5), MealType.BREAKFAST, *snapshots)
    _log(meals, user_id, food_id, date(2025, 1, 5), MealType.SNACK, snapshots[0])
    _log(meals, user_id, food_id, date(2025, 1, 31), MealType.DINNER, snapshots[1])

    summary = service.monthly(user_id, 2025, 1)

    daily_sum = sum(day.nutrients.calories for day in summary.days)
    assert daily_sum == pytest.approx(120.25 + 80.5 + 120.25 + 80.5)
    assert summary.days[4].nutrients.calories == 321.0
    assert summary.days[4].has_records


def test_monthly_without_records_averages_zero(
    service: SummaryService, user_id: int
) -> None:
    summary = service.monthly(user_id, 2025, 4)

    assert len(summary.days) == 30
    assert summary.monthly_average == Nutrients.zero()


@pytest.mark.parametrize(
    ("year", "month", "days"),
    [(2024, 2, 29), (2023, 2, 28), (1900, 2, 28), (2000, 2, 29), (2025, 12, 31)],
)
def test_month_range_follows_gregorian_rules(year: int, month: int, days: int) -> None:
    start, end = month_range(year, month)

    assert start == date(year, month, 1)
    assert (end - start).days == days
