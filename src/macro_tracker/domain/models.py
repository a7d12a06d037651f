"""Domain models for users and their daily targets."""

from dataclasses import dataclass
from datetime import datetime

from macro_tracker.domain.nutrition import Nutrients

DEFAULT_CALORIE_TARGET = 2000
DEFAULT_PROTEIN_TARGET = 60
DEFAULT_FAT_TARGET = 55
DEFAULT_CARB_TARGET = 300


@dataclass(frozen=True)
class DailyTargets:
    """Per-day nutrient goals for a user."""

    calories: int = DEFAULT_CALORIE_TARGET
    protein: int = DEFAULT_PROTEIN_TARGET
    fat: int = DEFAULT_FAT_TARGET
    carbohydrate: int = DEFAULT_CARB_TARGET

    @classmethod
    def from_columns(
        cls,
        calories: int | None,
        protein: int | None,
        fat: int | None,
        carbohydrate: int | None,
    ) -> "DailyTargets":
        """Build targets from nullable storage values, defaulting unset ones."""
        return cls(
            calories=DEFAULT_CALORIE_TARGET if calories is None else calories,
            protein=DEFAULT_PROTEIN_TARGET if protein is None else protein,
            fat=DEFAULT_FAT_TARGET if fat is None else fat,
            carbohydrate=DEFAULT_CARB_TARGET if carbohydrate is None else carbohydrate,
        )

    def as_nutrients(self) -> Nutrients:
        return Nutrients(
            calories=self.calories,
            protein=self.protein,
            fat=self.fat,
            carbohydrate=self.carbohydrate,
        )


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: int
    name: str
    email: str
    password_hash: str
    targets: DailyTargets
    created_at: datetime
    updated_at: datetime
