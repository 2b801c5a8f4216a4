"""Renewal Reminder Planner.

Walks the fixed lead times before a subscription's renewal date and, through
a ``WorkflowContext``, either suspends until a reminder is due or dispatches
it. Pure business logic with no Flask or database dependency; the store,
sender, clock and time zone are injected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Protocol

from app.domain.clock import parse_timestamp, same_calendar_day, utc_now
from app.domain.workflow_context import StepFailed, WorkflowContext

logger = logging.getLogger(__name__)

LEAD_DAYS: tuple[int, ...] = (7, 5, 2, 1)

FETCH_STEP_LABEL = "get subscription"

DUE = "due"
FUTURE = "future"
MISSED = "missed"


class SubscriptionStore(Protocol):
    def find_subscription_by_id(self, subscription_id: str) -> dict | None: ...


class ReminderSender(Protocol):
    def send(self, recipient: str, label: str, subscription: dict) -> None: ...


def sleep_label(lead_days: int) -> str:
    return f"Reminder {lead_days} days"


def reminder_label(lead_days: int) -> str:
    return f"{lead_days} days before reminder"


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ReminderEvent:
    """A candidate reminder: ``lead_days`` before renewal, on ``reminder_date``."""

    lead_days: int
    reminder_date: datetime
    state: str

    @property
    def label(self) -> str:
        return reminder_label(self.lead_days)


def classify_reminder(reminder_date: datetime, now: datetime, tz: tzinfo = timezone.utc) -> str:
    """``FUTURE`` if still ahead, ``DUE`` if it falls on today's date in ``tz``, else ``MISSED``."""
    if reminder_date > now:
        return FUTURE
    if same_calendar_day(now, reminder_date, tz):
        return DUE
    return MISSED


def build_schedule(
    renewal_date: datetime,
    now: datetime,
    lead_days: tuple[int, ...] = LEAD_DAYS,
    tz: tzinfo = timezone.utc,
) -> list[ReminderEvent]:
    """Classify each lead time as due today, in the future, or missed.

    Returns an empty list once the renewal date is at or before ``now``.
    Events keep the order of ``lead_days``.
    """
    if renewal_date <= now:
        return []

    events = []
    for days in lead_days:
        reminder_date = renewal_date - timedelta(days=days)
        events.append(ReminderEvent(days, reminder_date, classify_reminder(reminder_date, now, tz)))
    return events


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------
class ReminderPlanner:
    """Fires each lead-time reminder at most once, in descending lead order.

    A reminder whose delivery fails on every attempt the context allows is
    logged and skipped; later lead times are still processed.

    Args:
        store: Resolves a subscription snapshot by id (``None`` if missing).
        sender: Delivers one reminder notification.
        clock: Returns the current time as an aware datetime.
        tz: Zone in which "same calendar day" is evaluated.
        lead_days: Lead times in days, processed in the given order.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        sender: ReminderSender,
        clock: Callable[[], datetime] = utc_now,
        tz: tzinfo = timezone.utc,
        lead_days: tuple[int, ...] = LEAD_DAYS,
    ):
        self._store = store
        self._sender = sender
        self._clock = clock
        self._tz = tz
        self._lead_days = lead_days

    def run(self, context: WorkflowContext, subscription_id: str) -> None:
        logger.info("Reminder workflow triggered for subscription=%s", subscription_id)

        subscription = context.run_step(
            FETCH_STEP_LABEL,
            lambda: self._store.find_subscription_by_id(subscription_id),
        )
        if not subscription:
            logger.info("Subscription %s not found, stopping workflow", subscription_id)
            return

        if subscription.get("status") != "active":
            logger.info(
                "Subscription %s is %s, stopping workflow",
                subscription_id, subscription.get("status"),
            )
            return

        renewal_date = parse_timestamp(subscription["renewal_date"])
        schedule = build_schedule(renewal_date, self._clock(), self._lead_days, self._tz)
        if not schedule:
            logger.info("Renewal date has passed for %s, stopping workflow", subscription_id)
            return

        for event in schedule:
            if event.state == FUTURE:
                logger.info(
                    "Sleeping until %d-day reminder at %s",
                    event.lead_days, event.reminder_date.isoformat(),
                )
                context.suspend_until(sleep_label(event.lead_days), event.reminder_date)

            # The clock moves while suspended; classify again on resume.
            if classify_reminder(event.reminder_date, self._clock(), self._tz) != DUE:
                continue

            label = event.label
            try:
                context.run_step(label, lambda: self._dispatch(label, subscription))
            except StepFailed as err:
                logger.warning(
                    "Giving up on '%s' for subscription=%s: %s", label, subscription_id, err.error,
                )

    def _dispatch(self, label: str, subscription: dict) -> dict:
        recipient = subscription["user"]["email"]
        logger.info("Sending '%s' for subscription=%s", label, subscription["id"])
        self._sender.send(recipient=recipient, label=label, subscription=subscription)
        return {"recipient": recipient, "label": label}
