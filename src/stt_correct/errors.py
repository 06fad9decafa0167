"""Error types for stt-correct.

Matching and diffing are total over their inputs and never raise. Errors
exist for the edges of the library: loading configuration and entity
catalogs, and precondition violations by callers (such as handing
overlapping corrections to the applier).
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Categories of errors for handling decisions."""

    VALIDATION = "validation"  # Bad input from the caller
    CONFIGURATION = "configuration"  # Bad config file or settings
    RESOURCE = "resource"  # Missing file
    INTERNAL = "internal"  # Bug in code


class SttCorrectError(Exception):
    """Base exception for stt-correct errors.

    Attributes:
        message: Human-readable error message
        category: Error category for handling
        context: Additional context information
    """

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (context: {self.context})"
        return self.message


class ValidationError(SttCorrectError):
    """Caller passed input that violates a documented precondition."""

    category = ErrorCategory.VALIDATION


class InvalidCorrectionError(ValidationError):
    """A correction span does not fit inside the text it is applied to."""


class OverlappingCorrectionsError(ValidationError):
    """Two corrections handed to the applier cover overlapping spans."""


class ConfigurationError(SttCorrectError):
    """Configuration or catalog file has invalid content."""

    category = ErrorCategory.CONFIGURATION


class ResourceError(SttCorrectError):
    """Configuration or catalog file does not exist."""

    category = ErrorCategory.RESOURCE


def format_error_for_display(error: Exception) -> str:
    """Format an error message for user display.

    Args:
        error: Error to format

    Returns:
        Human-readable error message
    """
    if isinstance(error, SttCorrectError):
        category = error.category.value

        if error.context:
            context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())
            return f"[{category}] {error.message} ({context_str})"

        return f"[{category}] {error.message}"

    return f"[error] {type(error).__name__}: {error}"
