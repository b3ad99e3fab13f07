from pydantic_settings import BaseSettings
from typing import List
from pydantic import Field, field_validator
from core import constants


class Settings(BaseSettings):
    # --- Remote Host ---
    HOST: str = Field(constants.DEFAULT_HOST, description="Host serving the sourcemaps")
    SANDBOX_KEY: str = Field(
        constants.DEFAULT_SANDBOX_KEY, description="Value of the sandbox session cookie"
    )

    # --- Sync ---
    CONCURRENCY: int = Field(
        constants.DEFAULT_CONCURRENCY, description="Sourcemaps fetched per batch"
    )
    REQUEST_TIMEOUT: int = Field(
        constants.DEFAULT_REQUEST_TIMEOUT, description="Per-request timeout in seconds"
    )
    USER_AGENT: str = Field(constants.DEFAULT_USER_AGENT)

    # --- Files ---
    LINKS_FILE: str = Field(constants.DEFAULT_LINKS_FILE, description="JSON list of sourcemap paths")
    MIRROR_ROOT: str = Field(constants.DEFAULT_MIRROR_ROOT, description="Root of the mirrored source tree")
    REVISIONS_FILE: str = Field(constants.DEFAULT_REVISIONS_FILE)
    COMMIT_MESSAGE_FILE: str = Field(constants.DEFAULT_COMMIT_MESSAGE_FILE)
    TELEGRAM_MESSAGE_FILE: str = Field(constants.DEFAULT_TELEGRAM_MESSAGE_FILE)

    # --- Logging ---
    LOG_LEVEL: str = Field(constants.DEFAULT_LOG_LEVEL, description="Logging level")
    LOG_FILE: str = Field(constants.DEFAULT_LOG_FILE, description="Log file path")
    LOG_FORMAT: str = Field(constants.DEFAULT_LOG_FORMAT, description="Log format (text/json)")
    LOG_MAX_BYTES: int = Field(constants.DEFAULT_LOG_MAX_BYTES, description="Max log file size")
    LOG_BACKUP_COUNT: int = Field(constants.DEFAULT_LOG_BACKUP_COUNT, description="Log backup count")
    LOG_TIMEZONE: str = Field(constants.DEFAULT_LOG_TIMEZONE, description="Timezone of log timestamps")

    @field_validator("HOST", mode="before")
    @classmethod
    def parse_host(cls, v):
        if isinstance(v, str):
            v = v.strip()
            # Handle accidental copy-paste of a full URL
            for scheme in ("https://", "http://"):
                if v.startswith(scheme):
                    v = v[len(scheme):]
            v = v.rstrip("/")
        return v

    @field_validator("CONCURRENCY")
    @classmethod
    def check_concurrency(cls, v):
        if v < 1:
            raise ValueError("CONCURRENCY must be a positive integer")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def validate_all(self) -> List[str]:
        """
        Validate all configuration settings.
        Returns a list of warning/error messages.
        """
        errors = []

        # Critical
        if not self.HOST:
            errors.append("❌ HOST is missing")
        if not self.LINKS_FILE:
            errors.append("❌ LINKS_FILE is missing")
        if self.REQUEST_TIMEOUT <= 0:
            errors.append("❌ REQUEST_TIMEOUT must be positive")

        # Warnings
        if not self.SANDBOX_KEY:
            errors.append("⚠️ SANDBOX_KEY is empty - requests will be sent without a session cookie")

        if self.LOG_FORMAT.lower() not in ("text", "json"):
            errors.append(f"⚠️ Unknown LOG_FORMAT '{self.LOG_FORMAT}' - falling back to text")

        return errors


settings = Settings()
