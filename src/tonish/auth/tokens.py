"""Signed bearer tokens (HS256 JWT) carrying the user's id and e-mail."""

from dataclasses import dataclass
from datetime import timedelta

import jwt

from tonish.config import AuthSettings
from tonish.exceptions import AuthenticationError, InvalidTokenError
from tonish.models import User, utc_now

ALGORITHM = "HS256"


@dataclass(frozen=True)
class TokenClaims:
    """The identity a verified token vouches for."""

    user_id: int
    email: str


def _secret(settings: AuthSettings) -> str:
    secret = settings.jwt_secret.get_secret_value()
    if not secret:
        raise AuthenticationError("AUTH_JWT_SECRET is not configured")
    return secret


def issue_token(user: User, settings: AuthSettings) -> str:
    """Sign a token for user that expires after settings.token_ttl_hours."""
    claims = {
        "user_id": user.id,
        "email": user.email,
        "exp": utc_now() + timedelta(hours=settings.token_ttl_hours),
    }
    return jwt.encode(claims, _secret(settings), algorithm=ALGORITHM)


def decode_token(token: str, settings: AuthSettings) -> TokenClaims:
    """Verify signature and expiry and return the claims.

    Raises InvalidTokenError for anything other than a valid HS256 token
    with an integer user_id.
    """
    try:
        claims = jwt.decode(
            token,
            _secret(settings),
            algorithms=[ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.PyJWTError as e:
        raise InvalidTokenError() from e

    user_id = claims.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise InvalidTokenError("Invalid token claims")
    return TokenClaims(user_id=user_id, email=str(claims.get("email", "")))
