"""User service: read-only user queries."""

from app.domain.exceptions import ResourceNotFoundError
from app.repositories.user_repository import UserRepository


class UserService:
    """Lists and fetches users (never exposes password hashes)."""

    def __init__(self, user_repo: UserRepository | None = None):
        self._user_repo = user_repo or UserRepository()

    def get_all_users(self) -> list[dict]:
        return [u.to_dict() for u in self._user_repo.get_all()]

    def get_user(self, user_id: str) -> dict:
        """Fetch a user by ID or raise not-found."""
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User", user_id)
        return user.to_dict()
