"""Signed credential issuance and verification (HS256 JWT)."""

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from app.domain.exceptions import AuthenticationError


class TokenService:
    """Issues and verifies bearer tokens carrying a user id.

    Args:
        secret: Signing key. Defaults to the app's ``JWT_SECRET``.
        expires_in: Token lifetime in seconds. Defaults to ``JWT_EXPIRES_IN``.
        algorithm: JWT algorithm. Defaults to ``JWT_ALGORITHM``.
    """

    def __init__(
        self,
        secret: str | None = None,
        expires_in: int | None = None,
        algorithm: str | None = None,
    ):
        self._secret = secret
        self._expires_in = expires_in
        self._algorithm = algorithm

    @property
    def secret(self) -> str:
        return self._secret or current_app.config["JWT_SECRET"]

    @property
    def expires_in(self) -> int:
        return self._expires_in or current_app.config["JWT_EXPIRES_IN"]

    @property
    def algorithm(self) -> str:
        return self._algorithm or current_app.config.get("JWT_ALGORITHM", "HS256")

    def issue_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> str:
        """Return the user id carried by ``token`` or raise ``AuthenticationError``."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as err:
            raise AuthenticationError("Token has expired. Please sign in again") from err
        except jwt.PyJWTError as err:
            raise AuthenticationError("Invalid token. Please sign in again") from err

        user_id = payload.get("userId")
        if not user_id:
            raise AuthenticationError("Invalid token. Please sign in again")
        return user_id
