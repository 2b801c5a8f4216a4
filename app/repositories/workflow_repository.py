"""Workflow run repository."""

from datetime import datetime

from app.domain.models import WorkflowRun, WorkflowStep
from app.extensions import db
from app.repositories.base import BaseRepository


class WorkflowRunRepository(BaseRepository[WorkflowRun]):
    """Data access for WorkflowRun records and their step history."""

    def __init__(self):
        super().__init__(WorkflowRun)

    def get_due(self, now: datetime) -> list[WorkflowRun]:
        """Return sleeping runs whose wake-up time has passed."""
        return (
            WorkflowRun.query
            .filter(WorkflowRun.state == "sleeping", WorkflowRun.wake_at <= now)
            .order_by(WorkflowRun.wake_at)
            .all()
        )

    @staticmethod
    def claim(run_id: str) -> bool:
        """Move a sleeping run to ``running`` and commit.

        The conditional UPDATE matches only while the run is still sleeping,
        so of two workers racing for the same run exactly one gets ``True``.
        """
        claimed = (
            WorkflowRun.query
            .filter(WorkflowRun.id == run_id, WorkflowRun.state == "sleeping")
            .update({"state": "running"}, synchronize_session=False)
        )
        db.session.commit()
        return claimed == 1

    @staticmethod
    def record_step(run: WorkflowRun, label: str, result, error: str | None = None) -> WorkflowStep:
        """Persist the outcome of a step: its result, or the error it gave up with."""
        step = WorkflowStep(run_id=run.id, label=label, result=result, error=error)
        db.session.add(step)
        db.session.flush()
        return step
