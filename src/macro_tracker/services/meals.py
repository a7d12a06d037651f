"""Meal logging service."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from macro_tracker.domain.meals import (
    MealFilter,
    MealItemDraft,
    MealRecord,
    MealType,
)
from macro_tracker.domain.nutrition import scale_nutrients
from macro_tracker.errors import Forbidden, MissingFoods, NotFound, ValidationFailed
from macro_tracker.services.foods import FoodRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealItemInput:
    """Requested food and quantity for one meal item."""

    food_id: int
    quantity: float


class MealRepository(Protocol):
    """Persistence interface for meal records and their items."""

    def create_meal(
        self,
        user_id: int,
        record_date: date,
        meal_type: MealType,
        memo: str | None,
        items: list[MealItemDraft],
    ) -> MealRecord:
        """Create a meal record with its items in one transaction."""

    def get_meal(
        self, meal_id: int, include_food_details: bool = False
    ) -> MealRecord | None:
        """Return a meal record with items, if present."""

    def list_meals(self, user_id: int, meal_filter: MealFilter) -> list[MealRecord]:
        """Return the user's meal records matching the filter."""

    def list_meals_between(
        self, user_id: int, start: date, end: date
    ) -> list[MealRecord]:
        """Return meal records dated in ``[start, end)``."""

    def update_meal(self, meal_id: int, changes: dict[str, object]) -> MealRecord:
        """Update scalar columns of a meal record."""

    def replace_meal(
        self,
        meal_id: int,
        changes: dict[str, object],
        items: list[MealItemDraft],
    ) -> MealRecord:
        """Swap all items and apply scalar changes in one transaction."""

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal record and its items."""


@dataclass
class MealService:
    """Service that snapshots nutrients and persists meal records."""

    repository: MealRepository
    food_repository: FoodRepository

    def list_meals(self, user_id: int, meal_filter: MealFilter) -> list[MealRecord]:
        return self.repository.list_meals(user_id, meal_filter)

    def get_meal(self, user_id: int, meal_id: int) -> MealRecord:
        """Return a meal with full food details for its owner."""
        meal = self.repository.get_meal(meal_id, include_food_details=True)
        return self._check_owner(user_id, meal)

    def create_meal(
        self,
        user_id: int,
        record_date: date,
        meal_type: MealType,
        memo: str | None,
        items: Sequence[MealItemInput],
    ) -> MealRecord:
        """Create a meal, computing each item's snapshot from visible foods."""
        drafts = self._build_drafts(user_id, items)
        meal = self.repository.create_meal(
            user_id=user_id,
            record_date=record_date,
            meal_type=meal_type,
            memo=memo,
            items=drafts,
        )
        logger.info(
            "Meal created",
            extra={"user_id": user_id, "meal_id": meal.id, "items": len(drafts)},
        )
        return meal

    def update_meal(
        self,
        user_id: int,
        meal_id: int,
        changes: dict[str, object],
        items: Sequence[MealItemInput] | None = None,
    ) -> MealRecord:
        """Update scalar fields, replacing all items when a list is given."""
        existing = self._check_owner(user_id, self.repository.get_meal(meal_id))
        if items is None:
            if not changes:
                return existing
            return self.repository.update_meal(meal_id, changes)
        drafts = self._build_drafts(user_id, items)
        meal = self.repository.replace_meal(meal_id, changes, drafts)
        logger.info(
            "Meal items replaced",
            extra={"user_id": user_id, "meal_id": meal_id, "items": len(drafts)},
        )
        return meal

    def delete_meal(self, user_id: int, meal_id: int) -> None:
        self._check_owner(user_id, self.repository.get_meal(meal_id))
        self.repository.delete_meal(meal_id)
        logger.info("Meal deleted", extra={"user_id": user_id, "meal_id": meal_id})

    def _build_drafts(
        self, user_id: int, items: Sequence[MealItemInput]
    ) -> list[MealItemDraft]:
        if not items:
            raise ValidationFailed("Add at least one food to the meal.")
        requested = list(dict.fromkeys(item.food_id for item in items))
        foods = {
            food.id: food
            for food in self.food_repository.get_visible_foods(user_id, requested)
        }
        missing = [food_id for food_id in requested if food_id not in foods]
        if missing:
            raise MissingFoods(missing)
        return [
            MealItemDraft(
                food_id=item.food_id,
                quantity=item.quantity,
                nutrients=scale_nutrients(
                    foods[item.food_id].per_serving, item.quantity
                ),
            )
            for item in items
        ]

    @staticmethod
    def _check_owner(user_id: int, meal: MealRecord | None) -> MealRecord:
        if meal is None:
            raise NotFound("Meal record not found.")
        if meal.user_id != user_id:
            raise Forbidden("You do not have permission to access this meal record.")
        return meal
