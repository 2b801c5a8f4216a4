"""Subscription service: ownership-checked CRUD plus reminder scheduling.

Flow on create: persist (renewal derived / expiry applied on save) →
trigger the reminder workflow → return subscription and run id.
"""

import logging
from datetime import timedelta

from app.domain.clock import as_utc, utc_now
from app.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from app.domain.models import Subscription, User
from app.repositories.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Manages a user's subscriptions and starts their reminder workflows.

    Args:
        sub_repo: Subscription data access.
        workflow_client: Anything with ``trigger(subscription_id) -> run_id``.
            Defaults to the client selected by ``WORKFLOW_BACKEND``.
    """

    def __init__(self, sub_repo: SubscriptionRepository | None = None, workflow_client=None):
        self._sub_repo = sub_repo or SubscriptionRepository()
        self._workflow_client = workflow_client

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_subscription(self, user: User, **fields) -> dict:
        """Create a subscription for ``user`` and schedule its reminders."""
        subscription = self._sub_repo.create(user_id=user.id, **fields)
        self._sub_repo.commit()
        logger.info(
            "Subscription created id=%s user=%s renewal=%s status=%s",
            subscription.id, user.id, subscription.renewal_date, subscription.status,
        )

        run_id = self._get_workflow_client().trigger(subscription.id)
        return {"subscription": subscription.to_dict(), "workflowRunId": run_id}

    def update_subscription(self, user: User, subscription_id: str, **fields) -> dict:
        """Apply a partial update to one of ``user``'s subscriptions."""
        subscription = self._get_owned(user, subscription_id)
        renewal_date = fields.get("renewal_date")
        if renewal_date is not None and renewal_date <= as_utc(subscription.start_date):
            raise ValidationError("Renewal date must be after the start date")

        subscription = self._sub_repo.update(subscription, **fields)
        self._sub_repo.commit()
        logger.info("Subscription id=%s updated fields=%s", subscription_id, sorted(fields))
        return subscription.to_dict()

    def cancel_subscription(self, user: User, subscription_id: str) -> dict:
        subscription = self._get_owned(user, subscription_id)
        if subscription.status == "cancelled":
            raise ConflictError("Subscription is already cancelled")

        subscription = self._sub_repo.update(subscription, status="cancelled")
        self._sub_repo.commit()
        logger.info("Subscription id=%s cancelled", subscription_id)
        return subscription.to_dict()

    def delete_subscription(self, user: User, subscription_id: str) -> None:
        subscription = self._get_owned(user, subscription_id)
        self._sub_repo.delete(subscription)
        self._sub_repo.commit()
        logger.info("Subscription id=%s deleted", subscription_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_subscription(self, user: User, subscription_id: str) -> dict:
        return self._get_owned(user, subscription_id).to_dict()

    def list_user_subscriptions(self, user: User, owner_id: str) -> list[dict]:
        """Return ``owner_id``'s subscriptions; only the owner may ask."""
        if user.id != owner_id:
            raise AuthenticationError("You are not the owner of this account")
        return [s.to_dict() for s in self._sub_repo.get_by_user(owner_id)]

    def list_upcoming_renewals(self, user: User, days: int = 7) -> list[dict]:
        """Active subscriptions of ``user`` renewing in the next ``days`` days."""
        now = utc_now()
        subscriptions = self._sub_repo.get_upcoming_renewals(
            user.id, now, now + timedelta(days=days),
        )
        return [s.to_dict() for s in subscriptions]

    def find_subscription_by_id(self, subscription_id: str) -> dict | None:
        """Snapshot of a subscription with its owner, or ``None`` if missing.

        Used by the reminder planner; the result must stay JSON-serialisable
        because the workflow engine records it as step output.
        """
        subscription = self._sub_repo.get_by_id(subscription_id)
        if not subscription:
            return None
        return subscription.to_dict(include_user=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_owned(self, user: User, subscription_id: str) -> Subscription:
        subscription = self._sub_repo.get_by_id(subscription_id)
        if not subscription:
            raise ResourceNotFoundError("Subscription", subscription_id)
        if subscription.user_id != user.id:
            raise AuthorizationError("You are not the owner of this subscription")
        return subscription

    def _get_workflow_client(self):
        if self._workflow_client is not None:
            return self._workflow_client
        from app.services.workflow_client import get_workflow_client  # noqa: avoid circular import

        return get_workflow_client()
