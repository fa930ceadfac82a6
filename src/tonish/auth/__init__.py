"""Password authentication and bearer tokens."""

from tonish.auth.passwords import hash_password, verify_password
from tonish.auth.service import AuthService
from tonish.auth.tokens import TokenClaims, decode_token, issue_token

__all__ = [
    "AuthService",
    "TokenClaims",
    "decode_token",
    "hash_password",
    "issue_token",
    "verify_password",
]
