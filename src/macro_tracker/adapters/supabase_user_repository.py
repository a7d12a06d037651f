"""Supabase-backed user repository."""

from dataclasses import dataclass
from typing import Any

from postgrest import APIResponse
from postgrest.exceptions import APIError
from supabase import Client

from macro_tracker.adapters.supabase_rows import parse_timestamp
from macro_tracker.domain.models import DailyTargets, UserRecord
from macro_tracker.errors import EmailAlreadyExists
from macro_tracker.services.users import UserRepository

UNIQUE_VIOLATION = "23505"

USER_COLUMNS = (
    "id, name, email, password_hash, daily_calorie_target, daily_protein_target, "
    "daily_fat_target, daily_carb_target, created_at, updated_at"
)


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_id(self, user_id: int) -> UserRecord | None:
        """Return the user with the id, if present."""
        return self._get_one("id", user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user registered with the email, if present."""
        return self._get_one("email", email)

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user row and return it."""
        request = self.client.table("users").insert(
            {"name": name, "email": email, "password_hash": password_hash}
        )
        response = _execute(request, EmailAlreadyExists())
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_user(self, user_id: int, changes: dict[str, object]) -> UserRecord:
        """Apply column changes and return the updated row."""
        request = self.client.table("users").update(changes).eq("id", user_id)
        response = _execute(
            request, EmailAlreadyExists("This email address is already in use.")
        )
        if not response.data:
            raise RuntimeError("Failed to update user in Supabase")
        return _parse_user(response.data[0])

    def _get_one(self, column: str, value: object) -> UserRecord | None:
        response = (
            self.client.table("users")
            .select(USER_COLUMNS)
            .eq(column, value)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        email=str(row.get("email", "")),
        password_hash=str(row.get("password_hash") or ""),
        targets=DailyTargets.from_columns(
            calories=row.get("daily_calorie_target"),
            protein=row.get("daily_protein_target"),
            fat=row.get("daily_fat_target"),
            carbohydrate=row.get("daily_carb_target"),
        ),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )


def _execute(request: Any, duplicate_error: EmailAlreadyExists) -> APIResponse:
    """Run a write, reporting a taken email as ``duplicate_error``."""
    try:
        return request.execute()
    except APIError as exc:
        # a concurrent request claimed the email after the service checked it
        if exc.code == UNIQUE_VIOLATION:
            raise duplicate_error from exc
        raise
