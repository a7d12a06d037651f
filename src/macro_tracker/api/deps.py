"""Shared FastAPI dependencies."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from macro_tracker.containers import AppContainer
from macro_tracker.domain.models import UserRecord
from macro_tracker.errors import Unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Resolve the signed-in user from the bearer token."""
    if credentials is None:
        raise Unauthorized()
    return container.auth_service.resolve_user(credentials.credentials)
