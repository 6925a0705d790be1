"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and a set of
specialized subclasses used throughout the codebase to represent common
failure modes (configuration, data and schema validation, unreadable CSV
sources and user input). Using a centralized hierarchy makes error handling
and testing consistent.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'DATA_VALIDATION_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and may be retried.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> e.code
    'CODE'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class DataValidationError(AppError):
    """Raised for data that fails schema or content validation."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "DATA_VALIDATION_ERROR", message, context=context, transient=False
        )


class SchemaValidationError(DataValidationError):
    """Raised when a mapped row does not satisfy the bookstore schema.

    Parameters
    ----------
    message : str
        Human-readable summary of every violation.
    fields : Iterable[str]
        Names of the offending fields, in schema order.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.

    Examples
    --------
    >>> err = SchemaValidationError("name: required", fields=["name"])
    >>> err.fields
    ('name',)
    >>> err.code
    'DATA_VALIDATION_ERROR'
    """

    __slots__ = ("fields",)

    def __init__(
        self,
        message: str,
        *,
        fields: Iterable[str] = (),
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.fields = tuple(fields)
        merged = {"fields": list(self.fields), **dict(context or {})}
        super().__init__(message, context=merged)


class CsvSourceError(AppError):
    """Raised when the bookstore CSV file is missing or cannot be read."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("CSV_SOURCE_ERROR", message, context=context, transient=False)


class UserInputError(AppError):
    """Raised when user input is invalid."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("USER_INPUT_ERROR", message, context=context, transient=False)
