"""Subscription repository."""

from datetime import datetime

from app.domain.models import Subscription
from app.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Data access for Subscription records."""

    def __init__(self):
        super().__init__(Subscription)

    def get_by_user(self, user_id: str) -> list[Subscription]:
        """Return all subscriptions owned by a user, oldest first."""
        return (
            Subscription.query
            .filter_by(user_id=user_id)
            .order_by(Subscription.created_at)
            .all()
        )

    def get_upcoming_renewals(
        self, user_id: str, start: datetime, end: datetime,
    ) -> list[Subscription]:
        """Active subscriptions of a user renewing within ``[start, end]``."""
        return (
            Subscription.query
            .filter(
                Subscription.user_id == user_id,
                Subscription.status == "active",
                Subscription.renewal_date >= start,
                Subscription.renewal_date <= end,
            )
            .order_by(Subscription.renewal_date)
            .all()
        )
