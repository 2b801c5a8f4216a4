"""Durable-execution primitives consumed by workflows.

A workflow function receives a ``WorkflowContext`` and expresses its side
effects through two capabilities:

  - ``run_step``: execute a unit of work whose completion is recorded under a
    label, so that a resumed run replays the recorded result instead of
    executing it again.
  - ``suspend_until``: wait until a wall-clock instant. When the instant has
    already passed the call returns immediately; otherwise the engine persists
    the run and stops it, resuming later (possibly in another process).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class WorkflowSuspended(Exception):
    """Raised by a context to stop the current invocation until ``wake_at``."""

    def __init__(self, label: str, wake_at: datetime):
        self.label = label
        self.wake_at = wake_at
        super().__init__(f"Suspended at '{label}' until {wake_at.isoformat()}")


class StepRetry(WorkflowSuspended):
    """A step failed and is scheduled for another attempt at ``wake_at``."""


class StepFailed(Exception):
    """A step failed on every allowed attempt; its failure is recorded."""

    def __init__(self, label: str, error: str):
        self.label = label
        self.error = error
        super().__init__(f"Step '{label}' failed: {error}")


class WorkflowContext(ABC):
    """Interface every durable-execution backend must implement."""

    @property
    @abstractmethod
    def request_payload(self) -> dict:
        """The JSON payload the run was triggered with."""

    @abstractmethod
    def run_step(self, label: str, fn: Callable[[], T]) -> T | Any:
        """Execute ``fn`` once per run under ``label`` and return its result.

        A context may retry a failing ``fn`` (raising ``StepRetry`` to wait
        between attempts). Once attempts run out the failure is recorded and
        ``StepFailed`` is raised, now and on every replay of ``label``.
        """

    @abstractmethod
    def suspend_until(self, label: str, when: datetime) -> None:
        """Return once the current time is at or after ``when``."""
