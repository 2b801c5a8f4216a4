"""Workflows API namespace: inbound trigger for the reminder workflow.

A hosted workflow engine posts ``{"subscriptionId": ...}`` here, authenticated
with the shared ``WORKFLOW_TOKEN``, to start a reminder run on the in-process
engine.
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from pydantic import ValidationError as PydanticValidationError

from app.api.decorators import workflow_token_required
from app.domain.exceptions import AppError
from app.schemas.response import error_response, success_response
from app.schemas.workflow_schema import ReminderTriggerSchema
from app.services.workflow_engine import REMINDER_WORKFLOW, create_engine

ns = Namespace("workflows", description="Durable workflow entrypoints")

reminder_trigger_model = ns.model("ReminderTrigger", {
    "subscriptionId": fields.String(required=True, description="Subscription to remind about"),
})


@ns.route("/subscriptions/reminder")
class SubscriptionReminder(Resource):
    """Start a renewal reminder run."""

    method_decorators = [workflow_token_required]

    @ns.doc("trigger_subscription_reminder")
    @ns.expect(reminder_trigger_model)
    def post(self):
        try:
            data = ReminderTriggerSchema(**(request.get_json(silent=True) or {}))
            run_id = create_engine().trigger(
                REMINDER_WORKFLOW, {"subscriptionId": data.subscription_id},
            )
            return success_response({"workflowRunId": run_id}, 202)
        except PydanticValidationError as err:
            return error_response(
                "Invalid input", "VALIDATION_ERROR", 400,
                details=err.errors(include_url=False, include_context=False),
            )
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/runs/<string:run_id>")
@ns.param("run_id", "The workflow run ID")
class WorkflowRunDetail(Resource):
    """Inspect a run of the in-process engine."""

    method_decorators = [workflow_token_required]

    @ns.doc("get_workflow_run")
    def get(self, run_id: str):
        try:
            return success_response(create_engine().get_run(run_id))
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)
