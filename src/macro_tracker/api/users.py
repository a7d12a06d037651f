"""Endpoints for the signed-in user's account."""

from fastapi import APIRouter, Depends

from macro_tracker.api.deps import get_container, get_current_user
from macro_tracker.api.payloads import format_targets, format_user, success
from macro_tracker.api.schemas import (
    PasswordChangeRequest,
    ProfileUpdateRequest,
    TargetsUpdateRequest,
)
from macro_tracker.containers import AppContainer
from macro_tracker.domain.models import UserRecord

router = APIRouter(prefix="/users/me", tags=["users"])


@router.get("")
async def get_profile(
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    return success(format_user(user))


@router.put("")
async def update_profile(
    body: ProfileUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    updated = container.user_service.update_profile(
        user.id,
        name=body.name,
        email=None if body.email is None else str(body.email),
    )
    return success(format_user(updated))


@router.get("/targets")
async def get_targets(
    user: UserRecord = Depends(get_current_user),
) -> dict[str, object]:
    return success(format_targets(user))


@router.put("/targets")
async def update_targets(
    body: TargetsUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Update any subset of the daily targets."""
    updated = container.user_service.update_targets(user.id, body.changes())
    return success(format_targets(updated))


@router.put("/password")
async def change_password(
    body: PasswordChangeRequest,
    user: UserRecord = Depends(get_current_user),
    container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    container.user_service.change_password(
        user.id, body.current_password, body.new_password
    )
    return success({"message": "Password changed."})
