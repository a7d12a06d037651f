"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from macro_tracker.adapters.supabase_food_repository import SupabaseFoodRepository
from macro_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from macro_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from macro_tracker.config import Settings
from macro_tracker.services.auth import AuthService
from macro_tracker.services.foods import FoodService
from macro_tracker.services.meals import MealService
from macro_tracker.services.summary import SummaryService
from macro_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    user_service: UserService
    food_service: FoodService
    meal_service: MealService
    summary_service: SummaryService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    food_repository = SupabaseFoodRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    return AppContainer(
        settings=resolved_settings,
        auth_service=AuthService(
            repository=user_repository,
            secret=resolved_settings.jwt_secret,
            algorithm=resolved_settings.jwt_algorithm,
            token_ttl_seconds=resolved_settings.access_token_ttl_seconds,
        ),
        user_service=UserService(user_repository),
        food_service=FoodService(food_repository),
        meal_service=MealService(meal_repository, food_repository),
        summary_service=SummaryService(meal_repository, user_repository),
    )
