"""Users API namespace."""

from flask_restx import Namespace, Resource

from app.api.decorators import login_required
from app.domain.exceptions import AppError
from app.schemas.response import error_response, success_response
from app.services.user_service import UserService

ns = Namespace("users", description="User APIs")

_user_svc = UserService()


@ns.route("")
class UserList(Resource):
    method_decorators = [login_required]

    @ns.doc("list_users", security="Bearer")
    def get(self):
        """List all users."""
        return success_response(_user_svc.get_all_users())


@ns.route("/<string:user_id>")
@ns.param("user_id", "The user ID")
class UserDetail(Resource):
    method_decorators = [login_required]

    @ns.doc("get_user", security="Bearer")
    def get(self, user_id: str):
        """Fetch one user (without password)."""
        try:
            return success_response(_user_svc.get_user(user_id))
        except AppError as err:
            return error_response(err.message, err.error_code, err.status_code)
