"""Domain models for the food master."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from macro_tracker.domain.nutrition import Nutrients


class ServingUnit(StrEnum):
    """Units a serving size can be expressed in."""

    GRAM = "g"
    MILLILITRE = "ml"
    PIECE = "piece"
    CUP = "cup"
    SHEET = "sheet"


@dataclass(frozen=True)
class SharedFood:
    """Ownership marker for foods visible to every user and owned by none."""


@dataclass(frozen=True)
class OwnedFood:
    """Ownership marker for a food belonging to a single user."""

    user_id: int


FoodOwner = SharedFood | OwnedFood


def owner_from_user_id(user_id: int | None) -> FoodOwner:
    """Build the ownership variant from a nullable ``user_id`` column."""
    if user_id is None:
        return SharedFood()
    return OwnedFood(user_id)


@dataclass(frozen=True)
class Food:
    """A food master record with per-serving nutrient values."""

    id: int
    owner: FoodOwner
    name: str
    per_serving: Nutrients
    serving_size: float
    serving_unit: ServingUnit
    is_default: bool
    created_at: datetime
    updated_at: datetime

    @property
    def user_id(self) -> int | None:
        if isinstance(self.owner, OwnedFood):
            return self.owner.user_id
        return None

    def is_visible_to(self, user_id: int) -> bool:
        """Shared foods are visible to everyone, owned ones to their owner."""
        return isinstance(self.owner, SharedFood) or self.owner.user_id == user_id

    def is_owned_by(self, user_id: int) -> bool:
        return isinstance(self.owner, OwnedFood) and self.owner.user_id == user_id


@dataclass(frozen=True)
class FoodDraft:
    """Validated values for creating a food."""

    name: str
    per_serving: Nutrients
    serving_size: float
    serving_unit: ServingUnit


@dataclass(frozen=True)
class FoodPage:
    """One page of a food listing."""

    foods: list[Food]
    page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.limit)
