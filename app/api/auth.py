"""Auth API namespace: sign-up, sign-in, sign-out.

Controllers are kept thin (parse → validate → call service → respond).
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from pydantic import ValidationError as PydanticValidationError

from app.domain.exceptions import AppError
from app.schemas.auth_schema import SignInSchema, SignUpSchema
from app.schemas.response import error_response, success_response
from app.services.auth_service import AuthService

ns = Namespace("auth", description="Authentication APIs")

# ---------------------------------------------------------------------------
# Swagger models (for documentation only)
# ---------------------------------------------------------------------------
sign_up_model = ns.model("SignUpInput", {
    "name": fields.String(required=True, description="Display name"),
    "email": fields.String(required=True, description="Email address"),
    "password": fields.String(required=True, description="At least 6 characters"),
})

sign_in_model = ns.model("SignInInput", {
    "email": fields.String(required=True),
    "password": fields.String(required=True),
})

_auth_svc = AuthService()


@ns.route("/sign-up")
class SignUp(Resource):
    """Register a new user."""

    @ns.doc("sign_up")
    @ns.expect(sign_up_model)
    def post(self):
        """Create an account and return a bearer token."""
        try:
            data = SignUpSchema(**(request.get_json(silent=True) or {}))
            result = _auth_svc.sign_up(**data.model_dump())
            return success_response(result, 201)
        except PydanticValidationError as err:
            return error_response(
                "Invalid input", "VALIDATION_ERROR", 400,
                details=err.errors(include_url=False, include_context=False),
            )
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/sign-in")
class SignIn(Resource):
    """Exchange credentials for a token."""

    @ns.doc("sign_in")
    @ns.expect(sign_in_model)
    def post(self):
        """Verify email and password and return a bearer token."""
        try:
            data = SignInSchema(**(request.get_json(silent=True) or {}))
            result = _auth_svc.sign_in(data.email, data.password)
            return success_response(result)
        except PydanticValidationError as err:
            return error_response(
                "Invalid input", "VALIDATION_ERROR", 400,
                details=err.errors(include_url=False, include_context=False),
            )
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)


@ns.route("/sign-out")
class SignOut(Resource):
    """Stateless sign-out: the client discards its token."""

    @ns.doc("sign_out")
    def post(self):
        return success_response({"message": "Signed out"})
