"""Configuration and environment exceptions: options, paths, git."""

from typing import Any, Optional

from .base import SubweightError


class ConfigurationError(SubweightError):
    """Base class for errors that abort the whole run."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a path pattern is malformed or escapes the repository."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(reason, details={"pattern": pattern})
        self.pattern = pattern
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class TooManyFilesError(ConfigurationError):
    """Raised when a path pattern expands to more files than allowed."""

    def __init__(self, found: int, maximum: int):
        super().__init__(f"Found too many files. Found: {found}, Max: {maximum}")
        self.found = found
        self.maximum = maximum


class RevisionControlError(SubweightError):
    """Raised when fetching or resetting a git checkout fails."""

    def __init__(self, message: str, stderr: Optional[str] = None):
        super().__init__(message)
        self.stderr = stderr
