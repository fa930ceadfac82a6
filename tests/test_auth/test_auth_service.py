"""Tests for AuthService against a real UserStore."""

import pytest

from tonish.auth.passwords import verify_password
from tonish.auth.service import AuthService
from tonish.auth.tokens import decode_token
from tonish.config import AuthSettings
from tonish.data.users import UserStore
from tonish.exceptions import InvalidCredentialsError, RegistrationDisabledError


def _settings(**overrides) -> AuthSettings:
    values = {"jwt_secret": "service-test-secret-0123456789abcd"}
    values.update(overrides)
    return AuthSettings(**values)


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_issues_token(self, user_store: UserStore) -> None:
        settings = _settings(registration_enabled=True)
        service = AuthService(user_store, settings)
        await service.register("ann@example.com", "pw", "Ann")

        token, user = await service.login("ann@example.com", "pw")

        assert user.email == "ann@example.com"
        assert decode_token(token, settings).user_id == user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(
        self, user_store: UserStore
    ) -> None:
        service = AuthService(user_store, _settings(registration_enabled=True))
        await service.register("ann@example.com", "pw")

        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await service.login("ann@example.com", "wrong")
        with pytest.raises(InvalidCredentialsError, match="Invalid credentials"):
            await service.login("nobody@example.com", "pw")


class TestRegister:

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, user_store: UserStore) -> None:
        service = AuthService(user_store, _settings())
        with pytest.raises(RegistrationDisabledError):
            await service.register("a@example.com", "pw")

    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, user_store: UserStore) -> None:
        service = AuthService(user_store, _settings(registration_enabled=True))
        user = await service.register("a@example.com", "pw")
        assert user.password_hash != "pw"
        assert verify_password("pw", user.password_hash)


class TestSeedDefaultUser:

    @pytest.mark.asyncio
    async def test_skipped_without_credentials(self, user_store: UserStore) -> None:
        service = AuthService(user_store, _settings())
        assert await service.seed_default_user() is None

    @pytest.mark.asyncio
    async def test_created_once(self, user_store: UserStore) -> None:
        service = AuthService(
            user_store,
            _settings(default_user_email="me@example.com", default_user_password="pw"),
        )
        first = await service.seed_default_user()
        second = await service.seed_default_user()

        assert first is not None and second is not None
        assert first.id == second.id
        assert first.name == "Default User"
        token, _ = await service.login("me@example.com", "pw")
        assert token
