"""Request models for the HTTP API."""

import re
from datetime import date
from decimal import Decimal
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from macro_tracker.domain.foods import ServingUnit
from macro_tracker.domain.meals import MealType

MAX_NUTRIENT = 99999.99
MAX_EMAIL_LENGTH = 255
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TARGET_FIELDS = {
    "daily_calorie_target": "calories",
    "daily_protein_target": "protein",
    "daily_fat_target": "fat",
    "daily_carb_target": "carbohydrate",
}


def parse_iso_date(value: object) -> date:
    """Parse a strict ``YYYY-MM-DD`` value."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError("Dates must use the YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("Enter a valid date.") from exc


def check_email_length(value: object) -> object:
    if isinstance(value, str) and len(value) > MAX_EMAIL_LENGTH:
        raise ValueError("Email addresses must be at most 255 characters.")
    return value


def check_quantity_scale(value: float) -> float:
    if Decimal(str(value)).as_tuple().exponent < -2:
        raise ValueError("Quantities allow at most 2 decimal places.")
    return value


IsoDate = Annotated[date, BeforeValidator(parse_iso_date)]
NutrientValue = Annotated[float, Field(ge=0, le=MAX_NUTRIENT)]
ServingSize = Annotated[float, Field(ge=0.01, le=MAX_NUTRIENT)]
FoodName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)
]
UserName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]
Email = Annotated[EmailStr, BeforeValidator(check_email_length)]
Password = Annotated[str, Field(min_length=8)]
Memo = Annotated[str, Field(max_length=500)]
Quantity = Annotated[
    float, Field(ge=0.1, le=MAX_NUTRIENT), AfterValidator(check_quantity_scale)
]


class RegisterRequest(BaseModel):
    name: UserName
    email: Email
    password: Password
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(min_length=1)


class FoodCreateRequest(BaseModel):
    name: FoodName
    calories: NutrientValue
    protein: NutrientValue
    fat: NutrientValue
    carbohydrate: NutrientValue
    serving_size: ServingSize
    serving_unit: ServingUnit


class FoodUpdateRequest(BaseModel):
    """Partial food update; omitted fields keep their values."""

    name: FoodName | None = None
    calories: NutrientValue | None = None
    protein: NutrientValue | None = None
    fat: NutrientValue | None = None
    carbohydrate: NutrientValue | None = None
    serving_size: ServingSize | None = None
    serving_unit: ServingUnit | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class MealItemRequest(BaseModel):
    food_id: int = Field(gt=0)
    quantity: Quantity


class MealCreateRequest(BaseModel):
    record_date: IsoDate
    meal_type: MealType
    memo: Memo | None = None
    items: list[MealItemRequest] = Field(min_length=1)


class MealUpdateRequest(BaseModel):
    """Scalar fields change only when sent; ``items`` replaces every item."""

    meal_type: MealType | None = None
    memo: Memo | None = None
    items: list[MealItemRequest] | None = Field(default=None, min_length=1)

    @field_validator("meal_type", "items", mode="before")
    @classmethod
    def reject_null(cls, value: object) -> object:
        # omit the field to keep the stored value
        if value is None:
            raise ValueError("Omit the field instead of sending null.")
        return value

    def changes(self) -> dict[str, object]:
        changes: dict[str, object] = {}
        if self.meal_type is not None:
            changes["meal_type"] = self.meal_type
        # an explicit null clears the memo
        if "memo" in self.model_fields_set:
            changes["memo"] = self.memo
        return changes


class ProfileUpdateRequest(BaseModel):
    name: UserName | None = None
    email: Email | None = None


class TargetsUpdateRequest(BaseModel):
    daily_calorie_target: int | None = Field(default=None, ge=500, le=10000)
    daily_protein_target: int | None = Field(default=None, ge=1, le=500)
    daily_fat_target: int | None = Field(default=None, ge=1, le=500)
    daily_carb_target: int | None = Field(default=None, ge=1, le=1000)

    def changes(self) -> dict[str, int]:
        """Return supplied targets keyed by nutrient name."""
        sent = self.model_dump(exclude_unset=True, exclude_none=True)
        return {
            nutrient: sent[field]
            for field, nutrient in TARGET_FIELDS.items()
            if field in sent
        }


class PasswordChangeRequest(BaseModel):
    current_password: Password
    new_password: Password
