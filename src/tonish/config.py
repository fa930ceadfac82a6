"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """HTTP server and cross-origin configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: str = ""  # comma-separated; empty allows all origins without credentials
    auth_required: bool = False  # local installs run without the bearer check

    def cors_origin_list(self) -> list[str]:
        """Return configured CORS origins, or an empty list for the wildcard default."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class DatabaseSettings(BaseSettings):
    """SQLite storage location."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: str = "tonish.db"


class AuthSettings(BaseSettings):
    """Bearer token signing and default account settings.

    The default user is only seeded when both e-mail and password are set.
    """

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    jwt_secret: SecretStr = SecretStr("")
    token_ttl_hours: int = 24 * 7
    registration_enabled: bool = False
    default_user_email: str = ""
    default_user_password: SecretStr = SecretStr("")
    default_user_name: str = "Default User"


class AISettings(BaseSettings):
    """Local language-model server (Ollama) connection settings."""

    model_config = SettingsConfigDict(env_prefix="OLLAMA_")

    url: str = "http://localhost:11434"
    model: str = "qwen2.5-coder:3b"
    timeout_seconds: float = 120.0  # generation on small hardware is slow


class HubSettings(BaseSettings):
    """WebSocket broadcast hub tuning."""

    model_config = SettingsConfigDict(env_prefix="HUB_")

    send_buffer_size: int = 256  # per-client queue capacity before eviction


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    auth: AuthSettings = AuthSettings()
    ai: AISettings = AISettings()
    hub: HubSettings = HubSettings()
