"""
Identity service: resolve the acting user from an access token.

Tokens are HS256 JWTs whose ``sub`` claim is the app_user id. The token
may arrive with or without a ``Bearer`` prefix.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import jwt

from roster.config import config
from roster.errors import NotFoundError

ACCESS_TOKEN_EXPIRE_MINUTES = 60

# Request-facing field names mapped to JWT claims.
_CLAIMS = {
    "id": "sub",
}


class IdentityService:
    """Decodes access tokens issued for back-office users."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.jwt_secret = secret or config.JWT_SECRET
        self.jwt_algorithm = algorithm or config.JWT_ALGORITHM
        self.logger = logging.getLogger("service.IdentityService")

    def create_access_token(self, user_id: int, username: Optional[str] = None) -> str:
        """Create a short-lived access token."""
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        payload = {
            "sub": str(user_id),
            "username": username,
            "exp": expire,
            "type": "access",
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def decode_token(self, token: str) -> Optional[dict]:
        """Decode and validate a JWT token."""
        try:
            return jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError:
            self.logger.info("Rejected expired access token")
            return None
        except jwt.InvalidTokenError:
            return None

    def resolve_user(self, token: Optional[str], field: str) -> Any:
        """Return ``field`` of the user behind ``token``.

        Raises NotFoundError when the token is missing, invalid or expired,
        or does not carry the field.
        """
        if not token:
            raise NotFoundError("Missing identity token")
        if token.startswith("Bearer "):
            token = token[7:]

        payload = self.decode_token(token)
        if not payload or payload.get("type") != "access":
            raise NotFoundError("Identity token did not resolve to a user")

        value = payload.get(_CLAIMS.get(field, field))
        if value is None:
            raise NotFoundError(
                f"Identity token has no {field}",
                context={"field": field},
            )
        return value


_identity_service: Optional[IdentityService] = None


def get_identity_service() -> IdentityService:
    """Get the singleton identity service instance."""
    global _identity_service
    if _identity_service is None:
        _identity_service = IdentityService()
    return _identity_service
