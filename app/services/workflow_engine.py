"""In-process durable workflow engine.

Runs are stored in ``workflow_runs`` and completed steps in
``workflow_steps``. A run that asks to sleep until a future instant is
persisted as ``sleeping`` and stopped; ``resume_due`` later re-invokes the
workflow from the top, and ``ReplayWorkflowContext`` returns the recorded
result of every step that already completed instead of executing it again.

A step that raises is retried with exponential backoff: the run sleeps until
the next attempt, just like a timed suspension. After ``max_attempts``
failures the error is recorded on the step and ``StepFailed`` is raised to
the workflow, which may skip the step or let the run fail.

Flow: trigger → execute → (completed | sleeping | failed) → resume_due → execute …
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Any, Callable

from flask import current_app

from app.domain.clock import as_utc, resolve_timezone, utc_now
from app.domain.exceptions import ResourceNotFoundError, ValidationError
from app.domain.models import WorkflowRun, WorkflowStep
from app.domain.reminder_planner import ReminderPlanner, ReminderSender, SubscriptionStore
from app.domain.workflow_context import StepFailed, StepRetry, WorkflowContext, WorkflowSuspended
from app.repositories.workflow_repository import WorkflowRunRepository
from app.services.notification_service import build_sender

logger = logging.getLogger(__name__)

REMINDER_WORKFLOW = "subscription-reminder"

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF = timedelta(seconds=60)

Workflow = Callable[[WorkflowContext], None]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------
class ReplayWorkflowContext(WorkflowContext):
    """Database-backed context that replays recorded steps and retries failing ones."""

    def __init__(
        self,
        run: WorkflowRun,
        run_repo: WorkflowRunRepository,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_backoff: timedelta = DEFAULT_RETRY_BACKOFF,
    ):
        self._run = run
        self._run_repo = run_repo
        self._clock = clock
        self._max_attempts = max(1, max_attempts)
        self._retry_backoff = retry_backoff
        self._history: dict[str, WorkflowStep] = {step.label: step for step in run.steps}

    @property
    def request_payload(self) -> dict:
        return dict(self._run.payload or {})

    def run_step(self, label: str, fn: Callable[[], Any]) -> Any:
        if label in self._history:
            step = self._history[label]
            logger.debug("Replaying step '%s' for run=%s", label, self._run.id)
            if step.error:
                raise StepFailed(label, step.error)
            return step.result

        try:
            result = fn()
        except Exception as err:
            self._run_repo.rollback()
            raise self._fail_attempt(label, err) from err

        if self._run.retry_step == label:
            self._run_repo.update(self._run, retry_step=None, attempts=0, error=None)
        self._history[label] = self._run_repo.record_step(self._run, label, result)
        self._run_repo.commit()
        return result

    def suspend_until(self, label: str, when: datetime) -> None:
        when = as_utc(when)
        if self._clock() >= when:
            return
        raise WorkflowSuspended(label, when)

    def _fail_attempt(self, label: str, err: Exception) -> StepRetry | StepFailed:
        """Schedule another attempt of ``label`` or record that it gave up.

        Returns the signal for the caller to raise.
        """
        attempts = (self._run.attempts if self._run.retry_step == label else 0) + 1
        error = f"{type(err).__name__}: {err}"

        if attempts < self._max_attempts:
            wake_at = self._clock() + self._retry_backoff * 2 ** (attempts - 1)
            self._run_repo.update(self._run, retry_step=label, attempts=attempts, error=error)
            self._run_repo.commit()
            logger.warning(
                "Step '%s' of run=%s failed (attempt %d/%d), retrying at %s: %s",
                label, self._run.id, attempts, self._max_attempts, wake_at.isoformat(), error,
            )
            return StepRetry(label, wake_at)

        self._run_repo.update(self._run, retry_step=None, attempts=0, error=error)
        self._history[label] = self._run_repo.record_step(self._run, label, None, error=error)
        self._run_repo.commit()
        logger.error(
            "Step '%s' of run=%s gave up after %d attempts: %s",
            label, self._run.id, attempts, error,
        )
        return StepFailed(label, error)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class WorkflowEngine:
    """Starts, suspends and resumes registered workflows.

    Run-level failures (an exception the workflow does not handle, including
    ``StepFailed``) are recorded on the run (``state="failed"``) and logged;
    they are not raised to the caller that triggered or resumed the run.
    """

    def __init__(
        self,
        workflows: dict[str, Workflow],
        run_repo: WorkflowRunRepository | None = None,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_backoff: timedelta = DEFAULT_RETRY_BACKOFF,
    ):
        self._workflows = workflows
        self._run_repo = run_repo or WorkflowRunRepository()
        self._clock = clock
        self._max_attempts = max_attempts
        self._retry_backoff = retry_backoff

    def trigger(self, workflow: str, payload: dict) -> str:
        """Create a run for ``workflow`` and execute it until it sleeps or ends."""
        if workflow not in self._workflows:
            raise ValidationError(f"Unknown workflow '{workflow}'")

        run = self._run_repo.create(workflow=workflow, payload=payload, state="running")
        self._run_repo.commit()
        logger.info("Workflow run id=%s started for %s payload=%s", run.id, workflow, payload)

        self._execute(run)
        return run.id

    def resume_due(self, now: datetime | None = None) -> int:
        """Resume every sleeping run whose wake-up time has passed.

        Each run is claimed before it executes; runs another worker claimed
        first are skipped and not counted.
        """
        resumed = 0
        for run in self._run_repo.get_due(as_utc(now) if now else self._clock()):
            if not self._run_repo.claim(run.id):
                logger.info("Workflow run id=%s already claimed, skipping", run.id)
                continue
            logger.info("Resuming workflow run id=%s", run.id)
            self._execute(run)
            resumed += 1
        return resumed

    def get_run(self, run_id: str) -> dict:
        run = self._run_repo.get_by_id(run_id)
        if not run:
            raise ResourceNotFoundError("WorkflowRun", run_id)
        return run.to_dict()

    def _execute(self, run: WorkflowRun) -> None:
        self._run_repo.update(run, state="running", wake_at=None)
        self._run_repo.commit()
        context = ReplayWorkflowContext(
            run, self._run_repo, self._clock, self._max_attempts, self._retry_backoff,
        )

        try:
            self._workflows[run.workflow](context)
        except WorkflowSuspended as signal:
            self._run_repo.update(run, state="sleeping", wake_at=signal.wake_at)
            self._run_repo.commit()
            logger.info(
                "Workflow run id=%s sleeping at '%s' until %s",
                run.id, signal.label, signal.wake_at.isoformat(),
            )
            return
        except Exception as err:
            self._run_repo.rollback()
            self._run_repo.update(run, state="failed", error=f"{type(err).__name__}: {err}")
            self._run_repo.commit()
            logger.exception("Workflow run id=%s failed", run.id)
            return

        self._run_repo.update(run, state="completed")
        self._run_repo.commit()
        logger.info("Workflow run id=%s completed", run.id)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
def create_engine(
    clock: Callable[[], datetime] = utc_now,
    store: SubscriptionStore | None = None,
    sender: ReminderSender | None = None,
    tz: tzinfo | None = None,
) -> WorkflowEngine:
    """Build an engine with the reminder workflow registered.

    Collaborators default to the app's configuration and are resolved when a
    run executes.
    """

    def reminder_workflow(context: WorkflowContext) -> None:
        from app.services.subscription_service import SubscriptionService  # noqa: avoid circular import

        planner = ReminderPlanner(
            store=store or SubscriptionService(),
            sender=sender or build_sender(),
            clock=clock,
            tz=tz or resolve_timezone(current_app.config.get("REMINDER_TIMEZONE")),
        )
        planner.run(context, context.request_payload.get("subscriptionId"))

    config = current_app.config
    return WorkflowEngine(
        {REMINDER_WORKFLOW: reminder_workflow},
        clock=clock,
        max_attempts=config.get("WORKFLOW_STEP_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
        retry_backoff=timedelta(
            seconds=config.get("WORKFLOW_RETRY_BACKOFF_SECONDS", DEFAULT_RETRY_BACKOFF.total_seconds()),
        ),
    )
