"""Custom ddlbridge exceptions and warnings."""

from __future__ import annotations

import warnings


class DdlBridgeError(Exception):
    """Base exception for all ddlbridge-related errors.

    This is the root exception that all other ddlbridge exceptions inherit from.
    It provides enhanced error reporting with suggestions for resolution.

    Attributes:
        suggestions: List of suggested fixes or actions.

    Example:
        >>> raise DdlBridgeError(
        ...     "Duplicate table names found: users",
        ...     suggestions=["Rename one of the tables before importing"]
        ... )
    """

    def __init__(
        self,
        message: str,
        suggestions: list[str] | None = None,
    ):
        """Initialize a DdlBridgeError.

        Args:
            message: The error message.
            suggestions: Optional list of suggestions to fix the error.
        """
        super().__init__(message)
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        result = super().__str__()

        if self.suggestions:
            suggestions_text = "; ".join(self.suggestions)
            result += f" | {suggestions_text}"

        return result


# Configuration Exceptions
class ConfigError(DdlBridgeError):
    """Invalid configuration object.

    Raised from the `__post_init__` of configuration dataclasses.
    """


class ParserConfigError(ConfigError):
    """Invalid `ParserConfig` parameters."""


class ConverterConfigError(ConfigError):
    """Invalid `ModelConverterConfig` or `SQLGeneratorConfig` parameters."""


# Parsing Exceptions
class ParsingError(DdlBridgeError):
    """Errors raised by the primary AST parser.

    The public parse entry points never let this escape: it is the signal that
    hands control over to the legacy fallback parser.
    """


# Model Exceptions
class ModelError(DdlBridgeError):
    """Invalid values for schema model objects.

    Raised when a model object is constructed with values outside its allowed
    domain, such as an unknown foreign-key action.
    """


class SchemaImportError(DdlBridgeError):
    """Imported tables cannot be handed over to the editor.

    Raised when an import result contains duplicate table names, or tables
    with duplicate field names.
    """


class ParseWarning(UserWarning):
    """Warning category emitted when input is coerced or dropped while parsing."""

    pass


def validation_warning(message: str, *, filename: str, module: str) -> None:
    """Emit a `ParseWarning` without verbose absolute file paths.

    Args:
        message: The warning message.
        filename: Displayed filename, usually a dotted module path.
        module: Module name used by warning filters.
    """
    warnings.warn_explicit(
        message=message,
        category=ParseWarning,
        filename=filename,
        lineno=1,
        module=module,
    )
