"""Login, registration and default-account seeding."""

from tonish.auth.passwords import hash_password, verify_password
from tonish.auth.tokens import issue_token
from tonish.config import AuthSettings
from tonish.data.users import UserStore
from tonish.exceptions import InvalidCredentialsError, RegistrationDisabledError
from tonish.logging import get_logger
from tonish.models import User

logger = get_logger(__name__)


class AuthService:
    """Password authentication issuing bearer tokens."""

    def __init__(self, users: UserStore, settings: AuthSettings) -> None:
        self._users = users
        self._settings = settings

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """Return a signed token and the user.

        Unknown e-mail and wrong password are indistinguishable to the caller.
        """
        user = await self._users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login_failed", email=email)
            raise InvalidCredentialsError()

        token = issue_token(user, self._settings)
        logger.info("login_succeeded", user_id=user.id)
        return token, user

    async def register(self, email: str, password: str, name: str = "") -> User:
        if not self._settings.registration_enabled:
            raise RegistrationDisabledError()
        return await self._users.create(email, hash_password(password), name)

    async def seed_default_user(self) -> User | None:
        """Create the configured default account once.

        Skipped when no e-mail or password is configured, or when the
        account already exists.
        """
        email = self._settings.default_user_email
        password = self._settings.default_user_password.get_secret_value()
        if not email or not password:
            logger.info("default_user_seed_skipped", reason="credentials_not_configured")
            return None

        existing = await self._users.get_by_email(email)
        if existing is not None:
            logger.info("default_user_exists", email=email)
            return existing

        user = await self._users.create(
            email,
            hash_password(password),
            self._settings.default_user_name or "Default User",
        )
        logger.info("default_user_created", email=email)
        return user
