"""Tests for password hashing and bearer tokens."""

from datetime import timedelta

import jwt
import pytest

from tonish.auth.passwords import hash_password, verify_password
from tonish.auth.tokens import ALGORITHM, decode_token, issue_token
from tonish.config import AuthSettings
from tonish.exceptions import AuthenticationError, InvalidTokenError
from tonish.models import User, utc_now

SECRET = "unit-test-secret-0123456789abcdef"


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(jwt_secret=SECRET)  # type: ignore[arg-type]


@pytest.fixture
def user() -> User:
    return User(id=7, email="ann@example.com", password_hash="x", name="Ann")


class TestPasswords:

    def test_hash_verifies(self) -> None:
        hashed = hash_password("hunter2")
        assert hashed != "hunter2"
        assert verify_password("hunter2", hashed)

    def test_wrong_password_fails(self) -> None:
        assert not verify_password("nope", hash_password("hunter2"))

    def test_malformed_hash_fails(self) -> None:
        assert not verify_password("hunter2", "not-a-bcrypt-hash")


class TestTokens:

    def test_round_trip_claims(self, auth_settings: AuthSettings, user: User) -> None:
        claims = decode_token(issue_token(user, auth_settings), auth_settings)
        assert claims.user_id == 7
        assert claims.email == "ann@example.com"

    def test_expired_token_rejected(self, auth_settings: AuthSettings) -> None:
        token = jwt.encode(
            {"user_id": 1, "email": "a", "exp": utc_now() - timedelta(minutes=1)},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(InvalidTokenError):
            decode_token(token, auth_settings)

    def test_wrong_signature_rejected(self, auth_settings: AuthSettings, user: User) -> None:
        other = AuthSettings(jwt_secret="a-different-secret-0123456789abc")  # type: ignore[arg-type]
        with pytest.raises(InvalidTokenError):
            decode_token(issue_token(user, other), auth_settings)

    def test_garbage_rejected(self, auth_settings: AuthSettings) -> None:
        with pytest.raises(InvalidTokenError, match="Invalid or expired token"):
            decode_token("not.a.token", auth_settings)

    def test_missing_exp_rejected(self, auth_settings: AuthSettings) -> None:
        token = jwt.encode({"user_id": 1}, SECRET, algorithm=ALGORITHM)
        with pytest.raises(InvalidTokenError):
            decode_token(token, auth_settings)

    def test_non_integer_user_id_rejected(self, auth_settings: AuthSettings) -> None:
        token = jwt.encode(
            {"user_id": "1", "exp": utc_now() + timedelta(hours=1)},
            SECRET,
            algorithm=ALGORITHM,
        )
        with pytest.raises(InvalidTokenError, match="Invalid token claims"):
            decode_token(token, auth_settings)

    def test_empty_secret_refused(self, user: User) -> None:
        with pytest.raises(AuthenticationError):
            issue_token(user, AuthSettings())
