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
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class ConfigurationError(PackageError):
    """Raised when a provider cannot be built from settings."""

    setting: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.setting}: {self.message}"


@dataclass(frozen=True)
class PageLoadError(PackageError):
    """Raised when a page cannot be loaded from a file or URL."""

    source: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Failed to load page '{self.source}': {self.message}"
