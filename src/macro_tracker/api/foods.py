"""Food master endpoints."""

from fastapi import APIRouter, Depends, Query, status

from macro_tracker.api.deps import get_container, get_current_user
from macro_tracker.api.payloads import format_food, format_food_page, success
from macro_tracker.api.schemas import FoodCreateRequest, FoodUpdateRequest
from macro_tracker.containers import AppContainer
from macro_tracker.domain.foods import FoodDraft
from macro_tracker.domain.models import UserRecord
from macro_tracker.domain.nutrition import Nutrients
from macro_tracker.services.foods import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("")
async def list_foods(
    q: str | None = Query(default=None, max_length=200),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Search owned and shared foods."""
    result = container.food_service.list_foods(user.id, q, page=page, limit=limit)
    return success(format_food_page(result))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(
    body: FoodCreateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    draft = FoodDraft(
        name=body.name,
        per_serving=Nutrients(
            calories=body.calories,
            protein=body.protein,
            fat=body.fat,
            carbohydrate=body.carbohydrate,
        ),
        serving_size=body.serving_size,
        serving_unit=body.serving_unit,
    )
    food = container.food_service.create_food(user.id, draft)
    return success(format_food(food))


@router.get("/{food_id}")
async def get_food(
    food_id: int,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    food = container.food_service.get_food(user.id, food_id)
    return success(format_food(food, include_balance=True))


@router.put("/{food_id}")
async def update_food(
    food_id: int,
    body: FoodUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Partially update an owned food."""
    food = container.food_service.update_food(user.id, food_id, body.changes())
    return success(format_food(food))


@router.delete("/{food_id}")
async def delete_food(
    food_id: int,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.food_service.delete_food(user.id, food_id)
    return success({"message": "Food deleted."})
