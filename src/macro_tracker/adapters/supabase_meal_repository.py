"""Supabase repository for meal records and their items."""

from dataclasses import dataclass
from datetime import date

from postgrest import APIResponse
from postgrest.exceptions import APIError
from supabase import Client

from macro_tracker.adapters.supabase_rows import (
    parse_date,
    parse_nutrients,
    parse_timestamp,
)
from macro_tracker.domain.meals import (
    MealFilter,
    MealItemDraft,
    MealItemFood,
    MealItemRecord,
    MealRecord,
    MealType,
)
from macro_tracker.errors import ValidationFailed
from macro_tracker.services.meals import MealRepository

FOREIGN_KEY_VIOLATION = "23503"

RECORD_COLUMNS = "id, user_id, record_date, meal_type, memo, created_at, updated_at"
ITEM_COLUMNS = (
    "id, food_id, position, quantity, calories, protein, fat, carbohydrate"
)
FOOD_SUMMARY_COLUMNS = "id, name, serving_unit"
FOOD_DETAIL_COLUMNS = (
    "id, name, serving_unit, serving_size, calories, protein, fat, carbohydrate"
)


def _select(include_food_details: bool = False) -> str:
    food_columns = FOOD_DETAIL_COLUMNS if include_food_details else FOOD_SUMMARY_COLUMNS
    return f"{RECORD_COLUMNS}, meal_items({ITEM_COLUMNS}, foods({food_columns}))"


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal records.

    Writes that touch both tables go through the ``create_meal_record`` and
    ``replace_meal_record`` database functions so that a record and its items
    are stored in a single transaction.
    """

    client: Client

    def create_meal(
        self,
        user_id: int,
        record_date: date,
        meal_type: MealType,
        memo: str | None,
        items: list[MealItemDraft],
    ) -> MealRecord:
        """Create a meal record with its items and return it."""
        response = self._rpc(
            "create_meal_record",
            {
                "p_user_id": user_id,
                "p_record_date": record_date.isoformat(),
                "p_meal_type": meal_type.value,
                "p_memo": memo,
                "p_items": _items_payload(items),
            },
        )
        meal_id = _scalar(response.data)
        if meal_id is None:
            raise RuntimeError("Failed to create meal record")
        return self._require(int(meal_id))

    def get_meal(
        self, meal_id: int, include_food_details: bool = False
    ) -> MealRecord | None:
        """Return a meal record with items, if present."""
        response = (
            self.client.table("meal_records")
            .select(_select(include_food_details))
            .eq("id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def list_meals(self, user_id: int, meal_filter: MealFilter) -> list[MealRecord]:
        """Return meal records matching the filter, newest date first."""
        request = (
            self.client.table("meal_records").select(_select()).eq("user_id", user_id)
        )
        if meal_filter.on_date is not None:
            request = request.eq("record_date", meal_filter.on_date.isoformat())
        else:
            if meal_filter.start_date is not None:
                request = request.gte(
                    "record_date", meal_filter.start_date.isoformat()
                )
            if meal_filter.end_date is not None:
                request = request.lte("record_date", meal_filter.end_date.isoformat())
        if meal_filter.meal_type is not None:
            request = request.eq("meal_type", meal_filter.meal_type.value)
        # meal_type is a Postgres enum, so it sorts in declaration order
        response = (
            request.order("record_date", desc=True).order("meal_type").execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def list_meals_between(
        self, user_id: int, start: date, end: date
    ) -> list[MealRecord]:
        """Return meal records dated in ``[start, end)``."""
        response = (
            self.client.table("meal_records")
            .select(_select())
            .eq("user_id", user_id)
            .gte("record_date", start.isoformat())
            .lt("record_date", end.isoformat())
            .order("record_date")
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def update_meal(self, meal_id: int, changes: dict[str, object]) -> MealRecord:
        """Update scalar columns of a meal record."""
        self.client.table("meal_records").update(_columns(changes)).eq(
            "id", meal_id
        ).execute()
        return self._require(meal_id)

    def replace_meal(
        self,
        meal_id: int,
        changes: dict[str, object],
        items: list[MealItemDraft],
    ) -> MealRecord:
        """Swap all items and apply scalar changes atomically."""
        self._rpc(
            "replace_meal_record",
            {
                "p_meal_id": meal_id,
                "p_changes": _columns(changes),
                "p_items": _items_payload(items),
            },
        )
        return self._require(meal_id)

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal record; items cascade."""
        self.client.table("meal_records").delete().eq("id", meal_id).execute()

    def _rpc(self, function: str, params: dict[str, object]) -> APIResponse:
        try:
            return self.client.rpc(function, params).execute()
        except APIError as exc:
            # a food was deleted between validation and the write
            if exc.code == FOREIGN_KEY_VIOLATION:
                raise ValidationFailed(
                    "One or more foods no longer exist."
                ) from exc
            raise

    def _require(self, meal_id: int) -> MealRecord:
        meal = self.get_meal(meal_id)
        if meal is None:
            raise RuntimeError(f"Meal record {meal_id} disappeared after write")
        return meal


def _columns(changes: dict[str, object]) -> dict[str, object]:
    payload: dict[str, object] = {}
    for key, value in changes.items():
        payload[key] = value.value if isinstance(value, MealType) else value
    return payload


def _items_payload(items: list[MealItemDraft]) -> list[dict[str, object]]:
    return [
        {
            "food_id": item.food_id,
            "quantity": item.quantity,
            **item.nutrients.as_dict(),
        }
        for item in items
    ]


def _scalar(data: object) -> object:
    if isinstance(data, list):
        return data[0] if data else None
    return data


def _parse_record(row: dict[str, object]) -> MealRecord:
    raw_items = sorted(
        row.get("meal_items") or [],
        key=lambda item: (item.get("position") or 0, item.get("id") or 0),
    )
    return MealRecord(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        record_date=parse_date(row["record_date"]),
        meal_type=MealType(str(row["meal_type"])),
        memo=row.get("memo"),
        items=[_parse_item(item) for item in raw_items],
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _parse_item(row: dict[str, object]) -> MealItemRecord:
    food_row = row.get("foods") or {}
    has_details = "calories" in food_row
    food = MealItemFood(
        id=int(food_row.get("id") or row["food_id"]),
        name=str(food_row.get("name", "")),
        serving_unit=str(food_row.get("serving_unit", "")),
        per_serving=parse_nutrients(food_row) if has_details else None,
        serving_size=float(food_row["serving_size"]) if has_details else None,
    )
    return MealItemRecord(
        id=int(row["id"]),
        food=food,
        quantity=float(row.get("quantity") or 0.0),
        nutrients=parse_nutrients(row),
    )
