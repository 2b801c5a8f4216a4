"""SQLAlchemy ORM models.

Users own subscriptions; the workflow tables hold run history for the
in-process durable engine.
"""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import event

from app.domain.clock import as_utc, utc_now
from app.extensions import db

SUBSCRIPTION_STATUSES = ("active", "cancelled", "expired")
FREQUENCIES = ("daily", "weekly", "monthly", "yearly")
CURRENCIES = ("USD", "EUR", "GBP", "INR")
CATEGORIES = (
    "sports",
    "news",
    "entertainment",
    "lifestyle",
    "technology",
    "finance",
    "politics",
    "other",
)

# Days added to start_date when no renewal date is supplied.
RENEWAL_PERIOD_DAYS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}


def _new_id() -> str:
    return uuid.uuid4().hex


def _isoformat(value: datetime | None) -> str | None:
    value = as_utc(value)
    return value.isoformat() if value else None


def derive_renewal_date(start_date: datetime, frequency: str) -> datetime:
    """Return ``start_date`` plus the renewal period for ``frequency``."""
    return as_utc(start_date) + timedelta(days=RENEWAL_PERIOD_DAYS[frequency])


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------
class User(db.Model):
    """An account that owns subscriptions."""

    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False,
    )

    subscriptions = db.relationship(
        "Subscription", back_populates="user", lazy="dynamic", cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


# ---------------------------------------------------------------------------
# Subscription
# ---------------------------------------------------------------------------
class Subscription(db.Model):
    """A recurring service a user pays for and wants renewal reminders about."""

    __tablename__ = "subscriptions"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    user_id = db.Column(
        db.String(32), db.ForeignKey("users.id"), nullable=False, index=True,
    )
    name = db.Column(db.String(100), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(3), default="USD", nullable=False)
    frequency = db.Column(db.String(10), nullable=True)
    category = db.Column(db.String(30), nullable=False)
    payment_method = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(10), default="active", nullable=False, index=True)
    start_date = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)
    renewal_date = db.Column(db.DateTime(timezone=True), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False,
    )

    user = db.relationship("User", back_populates="subscriptions")

    def apply_lifecycle_rules(self, now: datetime | None = None) -> None:
        """Fill in a missing renewal date and expire past-due subscriptions."""
        now = now or utc_now()
        if self.start_date is None:
            self.start_date = now
        if self.renewal_date is None and self.frequency:
            self.renewal_date = derive_renewal_date(self.start_date, self.frequency)
        if self.renewal_date is not None and as_utc(self.renewal_date) < now:
            self.status = "expired"

    def to_dict(self, include_user: bool = False) -> dict:
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "price": float(self.price),
            "currency": self.currency,
            "frequency": self.frequency,
            "category": self.category,
            "payment_method": self.payment_method,
            "status": self.status,
            "start_date": _isoformat(self.start_date),
            "renewal_date": _isoformat(self.renewal_date),
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }
        if include_user and self.user is not None:
            data["user"] = {"id": self.user.id, "name": self.user.name, "email": self.user.email}
        return data


@event.listens_for(Subscription, "before_insert")
@event.listens_for(Subscription, "before_update")
def _subscription_before_save(_mapper, _connection, target: Subscription) -> None:
    target.apply_lifecycle_rules()


# ---------------------------------------------------------------------------
# Workflow run history
# ---------------------------------------------------------------------------
class WorkflowRun(db.Model):
    """One logical run of a durable workflow."""

    __tablename__ = "workflow_runs"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    workflow = db.Column(db.String(80), nullable=False, index=True)
    payload = db.Column(db.JSON, nullable=False, default=dict)
    state = db.Column(db.String(20), default="running", nullable=False, index=True)
    wake_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)
    error = db.Column(db.Text, nullable=True)
    # Consecutive failed attempts of the step named by retry_step.
    retry_step = db.Column(db.String(120), nullable=True)
    attempts = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False,
    )

    steps = db.relationship(
        "WorkflowStep",
        back_populates="run",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="WorkflowStep.id",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workflow": self.workflow,
            "payload": self.payload,
            "state": self.state,
            "wake_at": _isoformat(self.wake_at),
            "error": self.error,
            "retry_step": self.retry_step,
            "attempts": self.attempts,
            "steps": [step.label for step in self.steps],
            "failed_steps": [step.label for step in self.steps if step.error],
        }


class WorkflowStep(db.Model):
    """A completed step of a workflow run, replayed when the run resumes."""

    __tablename__ = "workflow_steps"
    __table_args__ = (db.UniqueConstraint("run_id", "label", name="uq_workflow_step_label"),)

    id = db.Column(db.Integer, primary_key=True)
    run_id = db.Column(
        db.String(32), db.ForeignKey("workflow_runs.id"), nullable=False, index=True,
    )
    label = db.Column(db.String(120), nullable=False)
    result = db.Column(db.JSON, nullable=True)
    error = db.Column(db.Text, nullable=True)
    completed_at = db.Column(db.DateTime(timezone=True), default=utc_now, nullable=False)

    run = db.relationship("WorkflowRun", back_populates="steps")
