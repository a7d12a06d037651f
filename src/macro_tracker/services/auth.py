"""Registration, login and bearer token resolution."""

import logging
from dataclasses import dataclass

from macro_tracker.domain.models import UserRecord
from macro_tracker.errors import EmailAlreadyExists, Unauthorized
from macro_tracker.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from macro_tracker.services.users import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    """Access token handed to a client after login."""

    access_token: str
    expires_in: int
    user: UserRecord
    token_type: str = "bearer"


@dataclass
class AuthService:
    """Creates accounts and exchanges credentials for signed tokens."""

    repository: UserRepository
    secret: str
    algorithm: str
    token_ttl_seconds: int

    def register(self, name: str, email: str, password: str) -> UserRecord:
        """Create a user with a hashed password."""
        if self.repository.get_by_email(email) is not None:
            raise EmailAlreadyExists()
        user = self.repository.create_user(
            name=name, email=email, password_hash=hash_password(password)
        )
        logger.info("User registered", extra={"user_id": user.id})
        return user

    def login(self, email: str, password: str) -> IssuedToken:
        """Verify credentials and issue an access token."""
        user = self.repository.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid email or password.")
        token = create_access_token(
            user.id,
            secret=self.secret,
            algorithm=self.algorithm,
            ttl_seconds=self.token_ttl_seconds,
        )
        return IssuedToken(
            access_token=token, expires_in=self.token_ttl_seconds, user=user
        )

    def resolve_user(self, token: str) -> UserRecord:
        """Return the user a bearer token belongs to."""
        user_id = decode_access_token(token, self.secret, self.algorithm)
        if user_id is None:
            raise Unauthorized("The access token is invalid or expired.")
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise Unauthorized("The access token is invalid or expired.")
        return user
