"""wc3launcher exceptions."""

from pathlib import Path
from typing import Any, Literal


class Wc3LauncherError(Exception):
    """Base exception for wc3launcher errors."""


class ValidationError(Wc3LauncherError, ValueError):
    """Raised when an operator-supplied field fails validation.

    Attributes:
        field: Name of the field that failed validation.
        value: The rejected value.
    """

    def __init__(
        self,
        message: str,
        *,
        field: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
    ) -> None:
        """Initialize with error message and field context.

        Args:
            message: Human-readable error message.
            field: Name of the field that failed validation.
            value: The rejected value.
        """
        super().__init__(message)
        self.field: str = field
        self.value: Any = value  # pyright: ignore[reportExplicitAny]


# =============================================================================
# Launch Exceptions
# =============================================================================


class LaunchError(Wc3LauncherError):
    """Base exception for failures to launch the worker."""


class BinaryNotFoundError(LaunchError):
    """Raised when no worker executable could be resolved."""


class SpawnFailedError(LaunchError):
    """Raised when the OS refuses to create the worker process.

    Attributes:
        command: The command line that could not be spawned.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        command: tuple[str, ...] = (),
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and spawn context.

        Args:
            message: Human-readable error message.
            command: The command line that could not be spawned.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.command: tuple[str, ...] = command
        self.cause: Exception | None = cause


class SupervisorBusyError(LaunchError):
    """Raised when start is called while a start or stop is in progress."""


# =============================================================================
# Settings Exceptions
# =============================================================================


class SettingsError(Wc3LauncherError):
    """Base exception for settings persistence errors."""


class SettingsIOError(SettingsError):
    """Raised when the settings file cannot be written.

    Attributes:
        path: The settings file path.
        operation: The operation that failed.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        operation: Literal["read", "write"],
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and file context.

        Args:
            message: Human-readable error message.
            path: The settings file path.
            operation: The operation that failed.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.path: Path = path
        self.operation: Literal["read", "write"] = operation
        self.cause: Exception | None = cause


# =============================================================================
# Resource Exceptions
# =============================================================================


class ResourceError(Wc3LauncherError):
    """Raised when a bundled resource cannot be read or materialized.

    Attributes:
        resource_name: Name of the bundled resource.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        resource_name: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and resource context.

        Args:
            message: Human-readable error message.
            resource_name: Name of the bundled resource.
            cause: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.resource_name: str = resource_name
        self.cause: Exception | None = cause
