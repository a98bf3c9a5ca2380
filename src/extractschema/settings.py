"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extractschema.exceptions import SettingsError
from extractschema.typing.enums import ExtractorBackendType

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "extractschema"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    extractor_backend: ExtractorBackendType = Field(
        default=ExtractorBackendType.REGEX,
        validation_alias="EXTRACTOR_BACKEND",
        description="Source extractor implementation: 'regex' or 'ast'.",
    )
    detect_patterns: bool = Field(
        default=False,
        validation_alias="DETECT_PATTERNS",
        description="Attach well-known regex patterns to inferred string schemas.",
    )
    extraction_concurrency: int = Field(
        default=8,
        validation_alias="EXTRACTION_CONCURRENCY",
        description="Maximum number of code blocks extracted concurrently.",
    )
    typescript_interface_name: str = Field(
        default="GeneratedSchema",
        validation_alias="TYPESCRIPT_INTERFACE_NAME",
        description="Interface name used when rendering TypeScript.",
    )

    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory to store results.",
    )

    @field_validator("extractor_backend", mode="before")
    @classmethod
    def _parse_extractor_backend(cls, value: object) -> object:
        """Accept backend names case-insensitively.

        Args:
            value (object): Raw setting value.

        Returns:
            object: Normalized value.
        """
        if isinstance(value, str):
            return ExtractorBackendType.from_str(value.strip().lower())
        return value

    @field_validator("extraction_concurrency")
    @classmethod
    def _validate_concurrency(cls, value: int) -> int:
        """Ensure concurrency is at least one.

        Args:
            value (int): Requested concurrency.

        Raises:
            ValueError: If the value is lower than one.

        Returns:
            int: Validated concurrency.
        """
        if value < 1:
            raise ValueError("EXTRACTION_CONCURRENCY must be >= 1")  # noqa: TRY003
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
