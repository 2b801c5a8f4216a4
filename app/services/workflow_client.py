"""Clients that start a reminder workflow run for a subscription.

``LocalWorkflowClient`` hands the run to the in-process engine.
``HttpWorkflowClient`` asks a hosted workflow engine to call back
``/api/v1/workflows/subscriptions/reminder`` on this server.
"""

from __future__ import annotations

import logging

import httpx
from flask import current_app

from app.domain.exceptions import WorkflowTriggerError
from app.services.workflow_engine import REMINDER_WORKFLOW, WorkflowEngine, create_engine

logger = logging.getLogger(__name__)

REMINDER_CALLBACK_PATH = "/api/v1/workflows/subscriptions/reminder"


class LocalWorkflowClient:
    """Triggers reminder runs on the in-process durable engine."""

    def __init__(self, engine: WorkflowEngine | None = None):
        self._engine = engine

    def trigger(self, subscription_id: str) -> str:
        engine = self._engine or create_engine()
        return engine.trigger(REMINDER_WORKFLOW, {"subscriptionId": subscription_id})


class HttpWorkflowClient:
    """Triggers reminder runs on a hosted workflow engine over HTTP.

    Args:
        trigger_url: The engine's trigger endpoint.
        token: Bearer token for the engine.
        server_url: Public base URL of this API, used to build the callback.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        trigger_url: str,
        token: str,
        server_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self._trigger_url = trigger_url
        self._token = token
        self._server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def trigger(self, subscription_id: str) -> str:
        body = {
            "url": f"{self._server_url}{REMINDER_CALLBACK_PATH}",
            "body": {"subscriptionId": subscription_id},
            "headers": {
                "content-type": "application/json",
                "authorization": f"Bearer {self._token}",
            },
            "retries": 0,
        }
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self._trigger_url,
                    json=body,
                    headers={"Authorization": f"Bearer {self._token}"},
                )
                response.raise_for_status()
                run_id = response.json().get("workflowRunId")
        except httpx.HTTPError as err:
            logger.error("Workflow trigger failed for subscription=%s: %s", subscription_id, err)
            raise WorkflowTriggerError(f"Workflow trigger failed: {err}") from err
        except ValueError as err:
            raise WorkflowTriggerError("Workflow engine returned a non-JSON response") from err

        if not run_id:
            raise WorkflowTriggerError("Workflow engine response is missing workflowRunId")

        logger.info("Workflow run id=%s queued for subscription=%s", run_id, subscription_id)
        return run_id


def get_workflow_client(config=None) -> LocalWorkflowClient | HttpWorkflowClient:
    """Pick a client from ``WORKFLOW_BACKEND`` (``local`` or ``http``)."""
    config = config if config is not None else current_app.config
    backend = config.get("WORKFLOW_BACKEND", "local")
    if backend == "local":
        return LocalWorkflowClient()
    if backend == "http":
        return HttpWorkflowClient(
            trigger_url=config["WORKFLOW_URL"],
            token=config.get("WORKFLOW_TOKEN", ""),
            server_url=config["SERVER_URL"],
            timeout=config.get("WORKFLOW_TIMEOUT_SECONDS", 10),
        )
    raise ValueError(f"Unknown WORKFLOW_BACKEND '{backend}'")
