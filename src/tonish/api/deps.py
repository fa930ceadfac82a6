"""Request-scoped helpers shared by the routers."""

from fastapi import Request

from tonish.auth.tokens import decode_token
from tonish.config import AppSettings
from tonish.exceptions import AuthenticationError


async def current_user_id(request: Request) -> int | None:
    """Resolve the bearer token to a user id.

    Without an Authorization header the request is anonymous (None) unless
    the server requires authentication. A header that is present but not a
    valid bearer token is always rejected.
    """
    settings: AppSettings = request.app.state.settings
    header = request.headers.get("Authorization")
    if not header:
        if settings.server.auth_required:
            raise AuthenticationError("Authorization header required")
        return None

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise AuthenticationError("Invalid authorization header format")

    return decode_token(parts[1], settings.auth).user_id
