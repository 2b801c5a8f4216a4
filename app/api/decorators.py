"""Route decorators shared by the API namespaces."""

import hmac
from functools import wraps

from flask import current_app, g, request

from app.domain.exceptions import AppError
from app.schemas.response import error_response
from app.services.auth_service import AuthService

_auth_svc = AuthService()


def login_required(fn):
    """Require ``Authorization: Bearer <token>`` and expose ``g.current_user``."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            g.current_user = _auth_svc.authenticate(request.headers.get("Authorization"))
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)
        return fn(*args, **kwargs)

    return wrapper


def workflow_token_required(fn):
    """Require ``Authorization: Bearer <WORKFLOW_TOKEN>``.

    Callers are the hosted workflow engine and operators, not users. With no
    ``WORKFLOW_TOKEN`` configured every request is rejected.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("WORKFLOW_TOKEN") or ""
        authorization = request.headers.get("Authorization") or ""
        scheme, _, token = authorization.partition(" ")
        if not expected or scheme != "Bearer" or not hmac.compare_digest(token, expected):
            return error_response("Invalid workflow token", "UNAUTHORIZED", 401)
        return fn(*args, **kwargs)

    return wrapper
