"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from macro_tracker.api.app import create_app
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.foods import (
    Food,
    FoodDraft,
    ServingUnit,
    owner_from_user_id,
)
from macro_tracker.domain.meals import (
    MealFilter,
    MealItemDraft,
    MealItemFood,
    MealItemRecord,
    MealRecord,
    MealType,
)
from macro_tracker.domain.models import DailyTargets, UserRecord
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.errors import ValidationFailed
from macro_tracker.services.auth import AuthService
from macro_tracker.services.foods import FoodRepository, FoodService
from macro_tracker.services.meals import MealRepository, MealService
from macro_tracker.services.summary import SummaryService
from macro_tracker.services.users import (
    TARGET_COLUMNS,
    UserRepository,
    UserService,
)

TEST_JWT_SECRET = "test-secret"
PASSWORD = "correct-horse"


@dataclass
class InMemoryDatabase:
    """Rows shared by the in-memory repositories."""

    users: dict[int, UserRecord] = field(default_factory=dict)
    foods: dict[int, Food] = field(default_factory=dict)
    meals: dict[int, MealRecord] = field(default_factory=dict)
    sequences: dict[str, int] = field(default_factory=dict)
    clock: datetime = datetime(2025, 6, 1, tzinfo=UTC)

    def next_id(self, table: str) -> int:
        self.sequences[table] = self.sequences.get(table, 0) + 1
        return self.sequences[table]

    def now(self) -> datetime:
        self.clock += timedelta(seconds=1)
        return self.clock


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    db: InMemoryDatabase = field(default_factory=InMemoryDatabase)

    def get_by_id(self, user_id: int) -> UserRecord | None:
        return self.db.users.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        for user in self.db.users.values():
            if user.email == email:
                return user
        return None

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        now = self.db.now()
        user = UserRecord(
            id=self.db.next_id("users"),
            name=name,
            email=email,
            password_hash=password_hash,
            targets=DailyTargets(),
            created_at=now,
            updated_at=now,
        )
        self.db.users[user.id] = user
        return user

    def update_user(self, user_id: int, changes: dict[str, object]) -> UserRecord:
        user = self.db.users[user_id]
        target_changes = {
            nutrient: changes[column]
            for nutrient, column in TARGET_COLUMNS.items()
            if column in changes
        }
        scalar_changes = {
            key: value
            for key, value in changes.items()
            if key not in TARGET_COLUMNS.values()
        }
        updated = replace(
            user,
            **scalar_changes,
            targets=replace(user.targets, **target_changes),
            updated_at=self.db.now(),
        )
        self.db.users[user_id] = updated
        return updated


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository for tests."""

    db: InMemoryDatabase = field(default_factory=InMemoryDatabase)

    def add_food(  # noqa: PLR0913
        self,
        name: str,
        per_serving: Nutrients,
        user_id: int | None = None,
        is_default: bool = False,
        serving_size: float = 100.0,
        serving_unit: ServingUnit = ServingUnit.GRAM,
    ) -> Food:
        """Insert a food directly, including shared and default ones."""
        now = self.db.now()
        food = Food(
            id=self.db.next_id("foods"),
            owner=owner_from_user_id(user_id),
            name=name,
            per_serving=per_serving,
            serving_size=serving_size,
            serving_unit=serving_unit,
            is_default=is_default,
            created_at=now,
            updated_at=now,
        )
        self.db.foods[food.id] = food
        return food

    def create_food(self, user_id: int, draft: FoodDraft) -> Food:
        return self.add_food(
            name=draft.name,
            per_serving=draft.per_serving,
            user_id=user_id,
            serving_size=draft.serving_size,
            serving_unit=draft.serving_unit,
        )

    def get_food(self, food_id: int) -> Food | None:
        return self.db.foods.get(food_id)

    def list_visible_foods(
        self, user_id: int, query: str | None, offset: int, limit: int
    ) -> tuple[list[Food], int]:
        matches = [
            food
            for food in self.db.foods.values()
            if food.is_visible_to(user_id)
            and (query is None or query.casefold() in food.name.casefold())
        ]
        matches.sort(key=lambda food: (food.updated_at, food.id), reverse=True)
        return matches[offset : offset + limit], len(matches)

    def get_visible_foods(self, user_id: int, food_ids: list[int]) -> list[Food]:
        return [
            self.db.foods[food_id]
            for food_id in food_ids
            if food_id in self.db.foods
            and self.db.foods[food_id].is_visible_to(user_id)
        ]

    def update_food(self, food_id: int, changes: dict[str, object]) -> Food:
        food = self.db.foods[food_id]
        nutrient_changes = {
            key: value
            for key, value in changes.items()
            if key in Nutrients.zero().as_dict()
        }
        updated = replace(
            food,
            name=changes.get("name", food.name),
            per_serving=replace(food.per_serving, **nutrient_changes),
            serving_size=changes.get("serving_size", food.serving_size),
            serving_unit=ServingUnit(changes.get("serving_unit", food.serving_unit)),
            updated_at=self.db.now(),
        )
        self.db.foods[food_id] = updated
        return updated

    def delete_food(self, food_id: int) -> None:
        self.db.foods.pop(food_id, None)

    def count_meal_items(self, food_id: int) -> int:
        return sum(
            1
            for meal in self.db.meals.values()
            for item in meal.items
            if item.food.id == food_id
        )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    db: InMemoryDatabase = field(default_factory=InMemoryDatabase)

    def create_meal(
        self,
        user_id: int,
        record_date: date,
        meal_type: MealType,
        memo: str | None,
        items: list[MealItemDraft],
    ) -> MealRecord:
        now = self.db.now()
        meal = MealRecord(
            id=self.db.next_id("meal_records"),
            user_id=user_id,
            record_date=record_date,
            meal_type=meal_type,
            memo=memo,
            items=self._items(items),
            created_at=now,
            updated_at=now,
        )
        self.db.meals[meal.id] = meal
        return meal

    def get_meal(
        self, meal_id: int, include_food_details: bool = False
    ) -> MealRecord | None:
        meal = self.db.meals.get(meal_id)
        if meal is None or not include_food_details:
            return meal
        return replace(meal, items=[self._with_details(item) for item in meal.items])

    def list_meals(self, user_id: int, meal_filter: MealFilter) -> list[MealRecord]:
        meals = [
            meal
            for meal in self.db.meals.values()
            if meal.user_id == user_id and _matches(meal, meal_filter)
        ]
        return sorted(
            meals,
            key=lambda meal: (-meal.record_date.toordinal(), meal.meal_type.position),
        )

    def list_meals_between(
        self, user_id: int, start: date, end: date
    ) -> list[MealRecord]:
        return [
            meal
            for meal in self.db.meals.values()
            if meal.user_id == user_id and start <= meal.record_date < end
        ]

    def update_meal(self, meal_id: int, changes: dict[str, object]) -> MealRecord:
        meal = replace(self.db.meals[meal_id], **changes, updated_at=self.db.now())
        self.db.meals[meal_id] = meal
        return meal

    def replace_meal(
        self,
        meal_id: int,
        changes: dict[str, object],
        items: list[MealItemDraft],
    ) -> MealRecord:
        meal = replace(
            self.db.meals[meal_id],
            **changes,
            items=self._items(items),
            updated_at=self.db.now(),
        )
        self.db.meals[meal_id] = meal
        return meal

    def delete_meal(self, meal_id: int) -> None:
        self.db.meals.pop(meal_id, None)

    def _items(self, drafts: list[MealItemDraft]) -> list[MealItemRecord]:
        records = []
        for draft in drafts:
            food = self.db.foods.get(draft.food_id)
            if food is None:
                raise ValidationFailed("One or more foods no longer exist.")
            records.append(
                MealItemRecord(
                    id=self.db.next_id("meal_items"),
                    food=MealItemFood(
                        id=food.id,
                        name=food.name,
                        serving_unit=food.serving_unit.value,
                    ),
                    quantity=draft.quantity,
                    nutrients=draft.nutrients,
                )
            )
        return records

    def _with_details(self, item: MealItemRecord) -> MealItemRecord:
        food = self.db.foods[item.food.id]
        return replace(
            item,
            food=replace(
                item.food,
                per_serving=food.per_serving,
                serving_size=food.serving_size,
            ),
        )


def _matches(meal: MealRecord, meal_filter: MealFilter) -> bool:
    if meal_filter.on_date is not None and meal.record_date != meal_filter.on_date:
        return False
    if meal_filter.on_date is None:
        if meal_filter.start_date and meal.record_date < meal_filter.start_date:
            return False
        if meal_filter.end_date and meal.record_date > meal_filter.end_date:
            return False
    return meal_filter.meal_type is None or meal.meal_type == meal_filter.meal_type


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://project.supabase.co",
        supabase_service_key="header.payload.signature",
        jwt_secret=TEST_JWT_SECRET,
        environment="test",
    )


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def user_repository(database: InMemoryDatabase) -> InMemoryUserRepository:
    return InMemoryUserRepository(database)


@pytest.fixture
def food_repository(database: InMemoryDatabase) -> InMemoryFoodRepository:
    return InMemoryFoodRepository(database)


@pytest.fixture
def meal_repository(database: InMemoryDatabase) -> InMemoryMealRepository:
    return InMemoryMealRepository(database)


@pytest.fixture
def container(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    food_repository: InMemoryFoodRepository,
    meal_repository: InMemoryMealRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        auth_service=AuthService(
            repository=user_repository,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_ttl_seconds=settings.access_token_ttl_seconds,
        ),
        user_service=UserService(user_repository),
        food_service=FoodService(food_repository),
        meal_service=MealService(meal_repository, food_repository),
        summary_service=SummaryService(meal_repository, user_repository),
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container), raise_server_exceptions=False)


@pytest.fixture
def user(container: AppContainer) -> UserRecord:
    return container.auth_service.register("Alice", "alice@mail.com", PASSWORD)


@pytest.fixture
def other_user(container: AppContainer) -> UserRecord:
    return container.auth_service.register("Bob", "bob@mail.com", PASSWORD)


@pytest.fixture
def auth_headers(container: AppContainer, user: UserRecord) -> dict[str, str]:
    issued = container.auth_service.login(user.email, PASSWORD)
    return {"Authorization": f"Bearer {issued.access_token}"}
