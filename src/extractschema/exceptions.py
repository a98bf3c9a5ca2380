"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class ExtractionError(PackageError):
    """Raised when schema extraction orchestration fails."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class ComponentParseError(ExtractionError):
    """Raised when component source cannot be parsed at all."""

    component_name: str = "Component"
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.line is None:
            return f"{self.component_name}: {self.message}"
        return f"{self.component_name}:{self.line}:{self.column}: {self.message}"


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in the compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"
