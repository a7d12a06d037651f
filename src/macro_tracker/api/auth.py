"""Registration and login endpoints."""

from fastapi import APIRouter, Depends, status

from macro_tracker.api.deps import get_container
from macro_tracker.api.payloads import format_token, format_user, success
from macro_tracker.api.schemas import LoginRequest, RegisterRequest
from macro_tracker.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Create an account."""
    user = container.auth_service.register(
        name=body.name, email=str(body.email), password=body.password
    )
    return success({"user": format_user(user)})


@router.post("/login")
async def login(
    body: LoginRequest, container: AppContainer = Depends(get_container)
) -> dict[str, object]:
    """Exchange credentials for a bearer token."""
    issued = container.auth_service.login(str(body.email), body.password)
    return success(format_token(issued))
