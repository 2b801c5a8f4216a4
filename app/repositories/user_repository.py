"""User repository."""

from app.domain.models import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Data access for User records."""

    def __init__(self):
        super().__init__(User)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by their (lowercased) email address."""
        return User.query.filter_by(email=email.strip().lower()).first()
