"""Engine settings read from PAYMENTS_* environment variables."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigError
from models import ResolvePolicy


class EngineConfig(BaseSettings):
    """Runtime settings for a processing run.

    Attributes:
        resolve_policy: What a resolve does to the entry's dispute stage.
            Read from `PAYMENTS_RESOLVE_POLICY` (`keep_open` or `clear_dispute`).
        log_level: Numeric logging level for stderr output.
            Read from `PAYMENTS_LOG_LEVEL` as a level name such as `DEBUG`.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    resolve_policy: ResolvePolicy = Field(default=ResolvePolicy.KEEP_OPEN)
    log_level: int = Field(default=logging.WARNING)

    @field_validator("resolve_policy", mode="before")
    @classmethod
    def _normalize_resolve_policy(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value):
        if isinstance(value, str):
            level = logging.getLevelName(value.strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"not a logging level: {value!r}")
            return level
        return value

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Load and validate settings from the environment.

        Raises:
            ConfigError: Raised when a PAYMENTS_* variable holds an invalid value.
        """
        try:
            return cls()
        except ValidationError as error:
            raise ConfigError(f"Invalid PAYMENTS_* configuration. Details: {error}") from error
