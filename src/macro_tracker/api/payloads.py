"""Response envelope and JSON formatters."""

from datetime import datetime

from macro_tracker.domain.foods import Food, FoodPage
from macro_tracker.domain.meals import MealItemRecord, MealRecord, MealType
from macro_tracker.domain.models import UserRecord
from macro_tracker.domain.nutrition import Nutrients, pfc_balance
from macro_tracker.domain.summary import DailySummary, MonthlySummary
from macro_tracker.services.auth import IssuedToken


def success(data: object) -> dict[str, object]:
    return {"success": True, "data": data}


def failure(code: str, message: str) -> dict[str, object]:
    return {"success": False, "error": {"code": code, "message": message}}


def format_food(food: Food, include_balance: bool = False) -> dict[str, object]:
    """Return the wire form of a food; detail views add ``pfc_balance``."""
    payload: dict[str, object] = {
        "id": food.id,
        "user_id": food.user_id,
        "name": food.name,
        **food.per_serving.as_dict(),
        "serving_size": food.serving_size,
        "serving_unit": food.serving_unit.value,
        "is_default": food.is_default,
        "created_at": _timestamp(food.created_at),
        "updated_at": _timestamp(food.updated_at),
    }
    if include_balance:
        balance = pfc_balance(
            food.per_serving.protein,
            food.per_serving.fat,
            food.per_serving.carbohydrate,
        )
        payload["pfc_balance"] = {
            "protein": balance.protein,
            "fat": balance.fat,
            "carbohydrate": balance.carbohydrate,
        }
    return payload


def format_food_page(page: FoodPage) -> dict[str, object]:
    return {
        "foods": [format_food(food) for food in page.foods],
        "pagination": {
            "current_page": page.page,
            "total_pages": page.total_pages,
            "total_count": page.total_count,
            "limit": page.limit,
        },
    }


def format_meal(meal: MealRecord) -> dict[str, object]:
    return {
        "id": meal.id,
        "record_date": meal.record_date.isoformat(),
        "meal_type": meal.meal_type.value,
        "memo": meal.memo,
        "items": [_format_item(item) for item in meal.items],
        "totals": meal.totals.as_dict(),
        "created_at": _timestamp(meal.created_at),
        "updated_at": _timestamp(meal.updated_at),
    }


def _format_item(item: MealItemRecord) -> dict[str, object]:
    food: dict[str, object] = {
        "id": item.food.id,
        "name": item.food.name,
        "serving_unit": item.food.serving_unit,
    }
    if item.food.per_serving is not None:
        food.update(item.food.per_serving.as_dict())
        food["serving_size"] = item.food.serving_size
    return {
        "id": item.id,
        "food": food,
        "quantity": item.quantity,
        **item.nutrients.as_dict(),
    }


def format_user(user: UserRecord) -> dict[str, object]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        **_target_columns(user),
        "created_at": _timestamp(user.created_at),
        "updated_at": _timestamp(user.updated_at),
    }


def format_targets(user: UserRecord) -> dict[str, object]:
    return {**_target_columns(user), "updated_at": _timestamp(user.updated_at)}


def _target_columns(user: UserRecord) -> dict[str, int]:
    return {
        "daily_calorie_target": user.targets.calories,
        "daily_protein_target": user.targets.protein,
        "daily_fat_target": user.targets.fat,
        "daily_carb_target": user.targets.carbohydrate,
    }


def format_token(issued: IssuedToken) -> dict[str, object]:
    return {
        "access_token": issued.access_token,
        "token_type": issued.token_type,
        "expires_in": issued.expires_in,
        "user": format_user(issued.user),
    }


def format_daily_summary(summary: DailySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "totals": summary.totals.as_dict(),
        "targets": summary.targets.as_dict(),
        "achievement": summary.achievement.as_dict(),
        "by_meal_type": {
            meal_type.value: summary.by_meal_type.get(
                meal_type, Nutrients.zero()
            ).as_dict()
            for meal_type in MealType
        },
    }


def format_monthly_summary(summary: MonthlySummary) -> dict[str, object]:
    return {
        "year": summary.year,
        "month": summary.month,
        "targets": summary.targets.as_dict(),
        "daily_summaries": [
            {
                "date": day.day.isoformat(),
                **day.nutrients.as_dict(),
                "has_records": day.has_records,
            }
            for day in summary.days
        ],
        "monthly_average": summary.monthly_average.as_dict(),
    }


def _timestamp(value: datetime) -> str:
    return value.isoformat()
