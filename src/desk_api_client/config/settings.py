from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from desk_api_client.config.env_aliases import get_flat_env_settings_source


class _BaseSection(BaseModel):
    model_config = {"extra": "forbid"}


class DeskSettings(_BaseSection):
    # Bare host ("acme.desk.com") or an origin with scheme ("https://acme.desk.com").
    hostname: str
    auth_type: str = "api_token"  # api_token|oauth
    api_token: SecretStr | None = None
    consumer_key: str | None = None
    consumer_secret: SecretStr | None = None
    access_token: SecretStr | None = None
    access_token_secret: SecretStr | None = None
    timeout_seconds: float = Field(default=30.0, gt=0)
    verify_tls: bool = True

    @field_validator("hostname")
    @classmethod
    def _strip_hostname(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped:
            raise ValueError("desk.hostname must not be empty")
        return stripped

    @model_validator(mode="after")
    def _require_credentials_for_auth_type(self) -> DeskSettings:
        auth_type = (self.auth_type or "").strip().lower()
        if auth_type not in {"api_token", "oauth"}:
            raise ValueError("desk.auth_type must be 'api_token' or 'oauth'")
        self.auth_type = auth_type

        if auth_type == "api_token" and not _has_secret(self.api_token):
            raise ValueError("desk.auth_type is 'api_token' but desk.api_token is not set")

        if auth_type == "oauth":
            missing = [
                name
                for name, value in (
                    ("consumer_key", self.consumer_key),
                    ("consumer_secret", self.consumer_secret),
                    ("access_token", self.access_token),
                    ("access_token_secret", self.access_token_secret),
                )
                if not _has_secret(value)
            ]
            if missing:
                raise ValueError(
                    "desk.auth_type is 'oauth' but these are not set: "
                    + ", ".join(f"desk.{name}" for name in missing)
                )
        return self


class TransportSettings(_BaseSection):
    # If true, allow httpx to read HTTP_PROXY/HTTPS_PROXY/NO_PROXY and other env settings.
    trust_env: bool = False
    # Allow disabling TLS verification. Strongly discouraged.
    allow_insecure_tls: bool = False
    # Retries apply to idempotent requests only (GET/HEAD/DELETE).
    max_retries: int = Field(default=3, ge=0, le=10)
    backoff_base_seconds: float = Field(default=0.2, ge=0)


class ObservabilitySettings(_BaseSection):
    log_level: str = "INFO"
    log_format: str | None = None  # json|human (overrides LOG_FORMAT/env when set)
    json_logs: bool = False

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"json", "human"}:
            return normalized
        raise ValueError("observability.log_format must be 'json' or 'human'")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    desk: DeskSettings
    transport: TransportSettings = Field(default_factory=TransportSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Settings:
        """
        Construct Settings from a mapping without reading environment variables.

        Useful in tests and for callers that keep credentials elsewhere.
        """
        class _InitOnlySettings(Settings):
            @classmethod
            def settings_customise_sources(
                cls,
                settings_cls,
                init_settings,
                env_settings,
                dotenv_settings,
                file_secret_settings,
            ):
                return (init_settings,)

        return _InitOnlySettings(**dict(data))

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # .env is loaded into os.environ by load_settings() and read through the flat
        # env source; the built-in dotenv source would reject flat names as extras.
        return (
            env_settings,
            get_flat_env_settings_source,
            init_settings,
            file_secret_settings,
        )


def _has_secret(value: SecretStr | str | None) -> bool:
    if value is None:
        return False
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    return bool(value.strip())
