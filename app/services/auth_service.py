"""Auth service: sign-up, sign-in and bearer-token resolution."""

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from app.domain.exceptions import AuthenticationError, AuthorizationError, ConflictError
from app.domain.models import User
from app.repositories.user_repository import UserRepository
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Registers users and exchanges credentials for signed tokens."""

    def __init__(
        self,
        user_repo: UserRepository | None = None,
        token_service: TokenService | None = None,
    ):
        self._user_repo = user_repo or UserRepository()
        self._tokens = token_service or TokenService()

    def sign_up(self, name: str, email: str, password: str) -> dict:
        """Create a user and return ``{"token", "user"}``."""
        if self._user_repo.get_by_email(email):
            raise ConflictError("Email already exists")

        user = self._user_repo.create(
            name=name,
            email=email.strip().lower(),
            password_hash=generate_password_hash(password),
        )
        self._user_repo.commit()
        logger.info("Created user id=%s", user.id)
        return {"token": self._tokens.issue_token(user.id), "user": user.to_dict()}

    def sign_in(self, email: str, password: str) -> dict:
        """Verify credentials and return ``{"token", "user"}``."""
        user = self._user_repo.get_by_email(email)
        if not user or not check_password_hash(user.password_hash, password):
            logger.warning("Failed sign-in for email=%s", email)
            raise AuthenticationError("Invalid email or password")

        logger.info("User id=%s signed in", user.id)
        return {"token": self._tokens.issue_token(user.id), "user": user.to_dict()}

    def authenticate(self, authorization: str | None) -> User:
        """Resolve an ``Authorization: Bearer <token>`` header to a user."""
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthenticationError("Unauthorized")

        token = authorization.split(" ", 1)[1].strip()
        if not token:
            raise AuthenticationError("Unauthorized")

        user_id = self._tokens.verify_token(token)
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise AuthorizationError("Forbidden")
        return user
