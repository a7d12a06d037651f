"""Meal record endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from macro_tracker.api.deps import get_container, get_current_user
from macro_tracker.api.payloads import format_meal, success
from macro_tracker.api.schemas import (
    MealCreateRequest,
    MealItemRequest,
    MealUpdateRequest,
    parse_iso_date,
)
from macro_tracker.containers import AppContainer
from macro_tracker.domain.meals import MealFilter, MealType
from macro_tracker.domain.models import UserRecord
from macro_tracker.errors import ValidationFailed
from macro_tracker.services.meals import MealItemInput

router = APIRouter(prefix="/meals", tags=["meals"])


@router.get("")
async def list_meals(
    on_date: str | None = Query(default=None, alias="date"),
    start_date: str | None = None,
    end_date: str | None = None,
    meal_type: MealType | None = None,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """List meals by exact date or inclusive date range."""
    meal_filter = MealFilter(
        on_date=_query_date(on_date),
        start_date=_query_date(start_date),
        end_date=_query_date(end_date),
        meal_type=meal_type,
    )
    meals = container.meal_service.list_meals(user.id, meal_filter)
    return success({"meals": [format_meal(meal) for meal in meals]})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    body: MealCreateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    meal = container.meal_service.create_meal(
        user.id,
        record_date=body.record_date,
        meal_type=body.meal_type,
        memo=body.memo,
        items=_item_inputs(body.items),
    )
    return success(format_meal(meal))


@router.get("/{meal_id}")
async def get_meal(
    meal_id: int,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    meal = container.meal_service.get_meal(user.id, meal_id)
    return success(format_meal(meal))


@router.put("/{meal_id}")
async def update_meal(
    meal_id: int,
    body: MealUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update scalar fields, replacing all items when ``items`` is sent."""
    items = None if body.items is None else _item_inputs(body.items)
    meal = container.meal_service.update_meal(
        user.id, meal_id, body.changes(), items=items
    )
    return success(format_meal(meal))


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: int,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.meal_service.delete_meal(user.id, meal_id)
    return success({"message": "Meal record deleted."})


def _query_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError as exc:
        raise ValidationFailed(str(exc)) from exc


def _item_inputs(items: list[MealItemRequest]) -> list[MealItemInput]:
    return [
        MealItemInput(food_id=item.food_id, quantity=item.quantity) for item in items
    ]
