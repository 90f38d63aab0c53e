"""Build-time and host exception classes for eventglue.

Transformation errors never reach a generated adapter at runtime; the
adapter's own failure type lives in ``eventglue.runtime.errors``.
"""

from typing import Any


class TransformError(Exception):
    """Base exception for failures while transforming a handler module."""

    def __init__(
        self,
        message: str,
        error_code: str = "TRANSFORM_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable diagnostic
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.filename: str | None = None
        self.lineno: int | None = None

    def locate(self, filename: str | None, lineno: int | None) -> "TransformError":
        """
        Attach a source position unless one is already set.

        Args:
            filename: Source file being transformed
            lineno: Line of the offending definition

        Returns:
            The same exception, for re-raising
        """
        if self.filename is None:
            self.filename = filename
        if self.lineno is None:
            self.lineno = lineno
        return self

    def diagnostic(self) -> str:
        """Render as ``path:line: error[CODE]: message``."""
        location = self.filename or "<unknown>"
        if self.lineno is not None:
            location = f"{location}:{self.lineno}"
        return f"{location}: error[{self.error_code}]: {self.message}"


class InvalidAttributeError(TransformError):
    """Raised for an unknown token in an @event argument list."""

    def __init__(self, token: str) -> None:
        """
        Initialize InvalidAttributeError.

        Args:
            token: The offending token, as written
        """
        super().__init__(
            message=f"Invalid attribute: {token}",
            error_code="INVALID_ATTRIBUTE",
            details={"token": token},
        )
        self.token = token


class MissingHandlerKindError(TransformError):
    """Raised when neither 'fetch' nor 'scheduled' was supplied."""

    def __init__(self) -> None:
        super().__init__(
            message=(
                "must have either 'fetch' or 'scheduled' attribute, "
                "e.g. @event(fetch)"
            ),
            error_code="MISSING_HANDLER_KIND",
        )


class ConflictingHandlerKindError(TransformError):
    """Raised when both handler kinds are selected in strict mode."""

    def __init__(self, first: str, second: str) -> None:
        """
        Initialize ConflictingHandlerKindError.

        Args:
            first: Kind selected first
            second: Conflicting kind selected later
        """
        super().__init__(
            message=f"'{first}' and '{second}' are mutually exclusive",
            error_code="CONFLICTING_HANDLER_KIND",
            details={"kinds": [first, second]},
        )


class UnsupportedModifierError(TransformError):
    """Raised when a modifier is given to a kind that cannot use it."""

    def __init__(self, modifier: str, kind: str) -> None:
        """
        Initialize UnsupportedModifierError.

        Args:
            modifier: The modifier token
            kind: The selected handler kind
        """
        super().__init__(
            message=f"'{modifier}' has no effect on '{kind}' handlers",
            error_code="UNSUPPORTED_MODIFIER",
            details={"modifier": modifier, "kind": kind},
        )


class InvalidHandlerError(TransformError):
    """Raised when @event decorates something that cannot be exported."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_HANDLER",
            details={"name": name} if name else None,
        )


class DuplicateExportError(TransformError):
    """Raised when a module defines two handlers for the same export."""

    def __init__(self, export_name: str, first_lineno: int | None = None) -> None:
        """
        Initialize DuplicateExportError.

        Args:
            export_name: The export both handlers would occupy
            first_lineno: Line of the first handler
        """
        super().__init__(
            message=f"duplicate '{export_name}' handler in module",
            error_code="DUPLICATE_EXPORT",
            details={"export": export_name, "first_lineno": first_lineno},
        )


class ExportGenerationError(TransformError):
    """Raised by a binding export generator that cannot expand a wrapper."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            error_code="EXPORT_GENERATION_FAILED",
            details=details,
        )


class HostError(Exception):
    """Base exception for hosts that load and dispatch generated exports."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "HOST_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code used by the development host
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class NoExportsError(HostError):
    """Raised when a loaded module has no 'fetch' or 'scheduled' export."""

    def __init__(self, module_name: str) -> None:
        super().__init__(
            message=f"module {module_name!r} defines no @event handlers",
            status_code=500,
            error_code="NO_EXPORTS",
            details={"module": module_name},
        )


class ExportNotFoundError(HostError):
    """Raised when an event arrives for an export the module lacks (404)."""

    def __init__(self, export_name: str) -> None:
        super().__init__(
            message=f"no '{export_name}' handler is exported",
            status_code=404,
            error_code="EXPORT_NOT_FOUND",
            details={"export": export_name},
        )
