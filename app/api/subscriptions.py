"""Subscriptions API namespace.

Every route requires a bearer token; a user may only read or change their
own subscriptions. Controllers are kept thin (parse → validate → call
service → respond).
"""

from flask import g, request
from flask_restx import Namespace, Resource, fields
from pydantic import ValidationError as PydanticValidationError

from app.api.decorators import login_required
from app.domain.exceptions import AppError
from app.schemas.response import error_response, success_response
from app.schemas.subscription_schema import SubscriptionCreateSchema, SubscriptionUpdateSchema
from app.services.subscription_service import SubscriptionService

ns = Namespace("subscriptions", description="Subscription tracking APIs")

# ---------------------------------------------------------------------------
# Swagger models (for documentation only)
# ---------------------------------------------------------------------------
subscription_model = ns.model("SubscriptionInput", {
    "name": fields.String(required=True),
    "price": fields.Float(required=True, min=0, max=10000),
    "currency": fields.String(default="USD", enum=["USD", "EUR", "GBP", "INR"]),
    "frequency": fields.String(enum=["daily", "weekly", "monthly", "yearly"]),
    "category": fields.String(required=True, enum=[
        "sports", "news", "entertainment", "lifestyle",
        "technology", "finance", "politics", "other",
    ]),
    "paymentMethod": fields.String(required=True),
    "status": fields.String(default="active", enum=["active", "cancelled", "expired"]),
    "startDate": fields.DateTime(description="Defaults to now; must not be in the future"),
    "renewalDate": fields.DateTime(description="Derived from frequency when omitted"),
})

_subscription_svc = SubscriptionService()


def _invalid_input(err: PydanticValidationError):
    return error_response(
        "Invalid input", "VALIDATION_ERROR", 400,
        details=err.errors(include_url=False, include_context=False),
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@ns.route("")
class SubscriptionCreate(Resource):
    method_decorators = [login_required]

    @ns.doc("create_subscription", security="Bearer")
    @ns.expect(subscription_model)
    def post(self):
        """Create a subscription and schedule its renewal reminders."""
        try:
            data = SubscriptionCreateSchema(**(request.get_json(silent=True) or {}))
            result = _subscription_svc.create_subscription(g.current_user, **data.model_dump())
            return success_response(result, 201)
        except PydanticValidationError as err:
            return _invalid_input(err)
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/upcoming")
class UpcomingRenewals(Resource):
    method_decorators = [login_required]

    @ns.doc("list_upcoming_renewals", security="Bearer", params={"days": "Window in days (default 7)"})
    def get(self):
        """List the current user's active subscriptions renewing soon."""
        try:
            days = int(request.args.get("days", "7"))
        except ValueError:
            days = -1
        if days < 0:
            return error_response("days must be a non-negative integer", "VALIDATION_ERROR", 400)
        return success_response(_subscription_svc.list_upcoming_renewals(g.current_user, days))


@ns.route("/user/<string:user_id>")
@ns.param("user_id", "The owning user ID")
class UserSubscriptions(Resource):
    method_decorators = [login_required]

    @ns.doc("list_user_subscriptions", security="Bearer")
    def get(self, user_id: str):
        """List a user's subscriptions (owner only)."""
        try:
            subscriptions = _subscription_svc.list_user_subscriptions(g.current_user, user_id)
            return success_response({"total": len(subscriptions), "subscriptions": subscriptions})
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/<string:subscription_id>")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionDetail(Resource):
    method_decorators = [login_required]

    @ns.doc("get_subscription", security="Bearer")
    def get(self, subscription_id: str):
        try:
            return success_response(
                _subscription_svc.get_subscription(g.current_user, subscription_id),
            )
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)

    @ns.doc("update_subscription", security="Bearer")
    @ns.expect(subscription_model)
    def put(self, subscription_id: str):
        """Partially update a subscription; omitted fields are kept."""
        try:
            data = SubscriptionUpdateSchema(**(request.get_json(silent=True) or {}))
            result = _subscription_svc.update_subscription(
                g.current_user, subscription_id, **data.model_dump(exclude_unset=True, exclude_none=True),
            )
            return success_response(result)
        except PydanticValidationError as err:
            return _invalid_input(err)
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)

    @ns.doc("delete_subscription", security="Bearer")
    def delete(self, subscription_id: str):
        try:
            _subscription_svc.delete_subscription(g.current_user, subscription_id)
            return success_response({"id": subscription_id})
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/<string:subscription_id>/cancel")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionCancel(Resource):
    method_decorators = [login_required]

    @ns.doc("cancel_subscription", security="Bearer")
    def put(self, subscription_id: str):
        """Mark a subscription as cancelled."""
        try:
            return success_response(
                _subscription_svc.cancel_subscription(g.current_user, subscription_id),
            )
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)
