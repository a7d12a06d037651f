"""Services for managing the food master."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macro_tracker.domain.foods import Food, FoodDraft, FoodPage, SharedFood
from macro_tracker.errors import FoodInUse, Forbidden, NotFound

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class FoodRepository(Protocol):
    """Persistence interface for food masters."""

    def create_food(self, user_id: int, draft: FoodDraft) -> Food:
        """Create a food owned by the user and return it."""

    def get_food(self, food_id: int) -> Food | None:
        """Return a food by id regardless of owner, if present."""

    def list_visible_foods(
        self, user_id: int, query: str | None, offset: int, limit: int
    ) -> tuple[list[Food], int]:
        """Return a page of foods visible to the user and the total count."""

    def get_visible_foods(self, user_id: int, food_ids: list[int]) -> list[Food]:
        """Return the subset of ids that resolve to foods visible to the user."""

    def update_food(self, food_id: int, changes: dict[str, object]) -> Food:
        """Apply column changes to a food and return it."""

    def delete_food(self, food_id: int) -> None:
        """Delete a food row."""

    def count_meal_items(self, food_id: int) -> int:
        """Return how many meal items reference the food."""


@dataclass
class FoodService:
    """Application service for food visibility and mutation rules."""

    repository: FoodRepository

    def list_foods(
        self,
        user_id: int,
        query: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> FoodPage:
        """List foods owned by the user or shared, newest first."""
        term = query.strip() if query else None
        foods, total = self.repository.list_visible_foods(
            user_id, term or None, offset=(page - 1) * limit, limit=limit
        )
        return FoodPage(foods=foods, page=page, limit=limit, total_count=total)

    def get_food(self, user_id: int, food_id: int) -> Food:
        """Return a food the user is allowed to see."""
        food = self._require(food_id)
        if not food.is_visible_to(user_id):
            raise Forbidden("You do not have permission to access this food.")
        return food

    def create_food(self, user_id: int, draft: FoodDraft) -> Food:
        food = self.repository.create_food(user_id, draft)
        logger.info("Food created", extra={"user_id": user_id, "food_id": food.id})
        return food

    def update_food(
        self, user_id: int, food_id: int, changes: dict[str, object]
    ) -> Food:
        """Apply a partial update to a food the user owns."""
        food = self._require_mutable(user_id, food_id)
        if not changes:
            return food
        return self.repository.update_food(food.id, changes)

    def delete_food(self, user_id: int, food_id: int) -> None:
        """Delete an owned food that no meal item references."""
        food = self._require_mutable(user_id, food_id)
        if self.repository.count_meal_items(food.id) > 0:
            raise FoodInUse()
        self.repository.delete_food(food.id)
        logger.info("Food deleted", extra={"user_id": user_id, "food_id": food.id})

    def _require(self, food_id: int) -> Food:
        food = self.repository.get_food(food_id)
        if food is None:
            raise NotFound("Food not found.")
        return food

    def _require_mutable(self, user_id: int, food_id: int) -> Food:
        food = self._require(food_id)
        if isinstance(food.owner, SharedFood):
            raise Forbidden("Shared foods cannot be modified or deleted.")
        if not food.is_owned_by(user_id):
            raise Forbidden("You do not have permission to modify this food.")
        if food.is_default:
            raise Forbidden("Default foods cannot be modified or deleted.")
        return food
