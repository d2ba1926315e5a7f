"""Custom exception hierarchy for kompile-core.

This module defines the exception classes used throughout kompile:
- KompileError: Base exception for all kompile errors
- RoutingError: A target type has no backend route
- PersistenceError: An artifact cannot be written where requested
- ConfigurationError: kompile.yaml parsing or validation failed
- BackendLoadError: A configured backend cannot be imported
- VersionAlreadySetError: The process-wide version was set twice
- CompletionPositionError: A completion position is outside the file

User-facing messages are safe to display. Technical details are logged
internally via structlog and never included in the message.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class KompileError(Exception):
    """Base exception for kompile.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details, logged but never
            exposed to the user.

    Example:
        >>> raise KompileError(
        ...     "Backend misconfigured",
        ...     internal_details="module 'acme.jvm' has no attribute 'factory'",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize KompileError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "kompile_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class RoutingError(KompileError):
    """Raised when a project type has no backend route.

    Also raised when an operation is called with a project whose type
    routes to a different backend family.
    """

    def __init__(self, project_type: object, *, internal_details: str | None = None) -> None:
        name = getattr(project_type, "value", project_type)
        super().__init__(
            f"No backend route for project type '{name}'",
            internal_details=internal_details,
        )
        self.project_type = project_type


class PersistenceError(KompileError):
    """Raised when an artifact path cannot be written under the output directory.

    Attributes:
        path: The offending relative path.
    """

    def __init__(self, path: str, reason: str, *, internal_details: str | None = None) -> None:
        super().__init__(f"Cannot write artifact '{path}': {reason}", internal_details=internal_details)
        self.path = path


class ConfigurationError(KompileError):
    """Raised when configuration file parsing or validation fails.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "backends.jvm").

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid backend reference",
        ...     file_path="kompile.yaml",
        ...     field_path="backends.jvm",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class BackendLoadError(ConfigurationError):
    """Raised when a backend reference cannot be imported or called.

    Attributes:
        reference: The "module:attribute" reference that failed.
    """

    def __init__(
        self,
        reference: str,
        *,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"Cannot load backend '{reference}'",
            field_path=field_path,
            internal_details=internal_details,
        )
        self.reference = reference


class VersionAlreadySetError(KompileError):
    """Raised when the process-wide version is set to a different value twice."""


class CompletionPositionError(KompileError):
    """Raised when a completion position lies outside the file.

    Attributes:
        line: Requested 0-based line.
        character: Requested 0-based column.
    """

    def __init__(self, file_name: str, line: int, character: int) -> None:
        super().__init__(f"Position {line}:{character} is outside '{file_name}'")
        self.line = line
        self.character = character
