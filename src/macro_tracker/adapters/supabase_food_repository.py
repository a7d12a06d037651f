"""Supabase repository for food masters."""

from dataclasses import dataclass

from supabase import Client

from macro_tracker.adapters.supabase_rows import (
    parse_nutrients,
    parse_timestamp,
)
from macro_tracker.domain.foods import (
    Food,
    FoodDraft,
    ServingUnit,
    owner_from_user_id,
)
from macro_tracker.services.foods import FoodRepository

FOOD_COLUMNS = (
    "id, user_id, name, calories, protein, fat, carbohydrate, serving_size, "
    "serving_unit, is_default, created_at, updated_at"
)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase implementation for food masters."""

    client: Client

    def create_food(self, user_id: int, draft: FoodDraft) -> Food:
        """Insert a user-owned food and return it."""
        response = (
            self.client.table("foods")
            .insert(
                {
                    "user_id": user_id,
                    "name": draft.name,
                    **draft.per_serving.as_dict(),
                    "serving_size": draft.serving_size,
                    "serving_unit": draft.serving_unit.value,
                    "is_default": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food")
        return _parse_food(response.data[0])

    def get_food(self, food_id: int) -> Food | None:
        """Return a food by id."""
        response = (
            self.client.table("foods")
            .select(FOOD_COLUMNS)
            .eq("id", food_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def list_visible_foods(
        self, user_id: int, query: str | None, offset: int, limit: int
    ) -> tuple[list[Food], int]:
        """Return owned and shared foods, optionally filtered by name."""
        request = (
            self.client.table("foods")
            .select(FOOD_COLUMNS, count="exact")
            .or_(_visible_to(user_id))
        )
        if query:
            request = request.ilike("name", f"%{_escape_like(query)}%")
        response = (
            request.order("updated_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        foods = [_parse_food(row) for row in response.data or []]
        return foods, int(response.count or 0)

    def get_visible_foods(self, user_id: int, food_ids: list[int]) -> list[Food]:
        """Return the foods among ``food_ids`` the user can see."""
        if not food_ids:
            return []
        response = (
            self.client.table("foods")
            .select(FOOD_COLUMNS)
            .in_("id", food_ids)
            .or_(_visible_to(user_id))
            .execute()
        )
        return [_parse_food(row) for row in response.data or []]

    def update_food(self, food_id: int, changes: dict[str, object]) -> Food:
        """Update a food row and return it."""
        response = (
            self.client.table("foods").update(changes).eq("id", food_id).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food")
        return _parse_food(response.data[0])

    def delete_food(self, food_id: int) -> None:
        """Delete a food row."""
        self.client.table("foods").delete().eq("id", food_id).execute()

    def count_meal_items(self, food_id: int) -> int:
        """Count meal items referencing a food."""
        response = (
            self.client.table("meal_items")
            .select("id", count="exact")
            .eq("food_id", food_id)
            .limit(1)
            .execute()
        )
        return int(response.count or 0)


def _visible_to(user_id: int) -> str:
    return f"user_id.eq.{user_id},user_id.is.null"


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _parse_food(row: dict[str, object]) -> Food:
    raw_user_id = row.get("user_id")
    return Food(
        id=int(row["id"]),
        owner=owner_from_user_id(None if raw_user_id is None else int(raw_user_id)),
        name=str(row.get("name", "")),
        per_serving=parse_nutrients(row),
        serving_size=float(row.get("serving_size") or 0.0),
        serving_unit=ServingUnit(str(row.get("serving_unit"))),
        is_default=bool(row.get("is_default", False)),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
