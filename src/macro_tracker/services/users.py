"""User profile, target and password management."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macro_tracker.domain.models import UserRecord
from macro_tracker.errors import EmailAlreadyExists, NotFound, Unauthorized
from macro_tracker.security import hash_password, verify_password

logger = logging.getLogger(__name__)

TARGET_COLUMNS = {
    "calories": "daily_calorie_target",
    "protein": "daily_protein_target",
    "fat": "daily_fat_target",
    "carbohydrate": "daily_carb_target",
}


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_id(self, user_id: int) -> UserRecord | None:
        """Return the user with the id, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user registered with the email, if present."""

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Create and return a new user record."""

    def update_user(self, user_id: int, changes: dict[str, object]) -> UserRecord:
        """Apply column changes and return the updated user."""


@dataclass
class UserService:
    """Application service for the signed-in user's account."""

    repository: UserRepository

    def get_user(self, user_id: int) -> UserRecord:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found.")
        return user

    def update_profile(
        self, user_id: int, name: str | None = None, email: str | None = None
    ) -> UserRecord:
        """Change the user's name and/or email."""
        user = self.get_user(user_id)
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name
        if email is not None:
            existing = self.repository.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise EmailAlreadyExists("This email address is already in use.")
            changes["email"] = email
        if not changes:
            return user
        return self.repository.update_user(user.id, changes)

    def update_targets(self, user_id: int, targets: dict[str, int]) -> UserRecord:
        """Update any subset of the daily targets.

        Keys are nutrient names (``calories``, ``protein``, ``fat``,
        ``carbohydrate``); values are validated by the caller.
        """
        user = self.get_user(user_id)
        changes = {TARGET_COLUMNS[key]: value for key, value in targets.items()}
        if not changes:
            return user
        return self.repository.update_user(user.id, changes)

    def change_password(
        self, user_id: int, current_password: str, new_password: str
    ) -> None:
        """Replace the password after verifying the current one."""
        user = self.get_user(user_id)
        if not verify_password(current_password, user.password_hash):
            raise Unauthorized("The current password is incorrect.")
        self.repository.update_user(
            user.id, {"password_hash": hash_password(new_password)}
        )
        logger.info("Password changed", extra={"user_id": user.id})
