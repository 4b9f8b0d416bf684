"""
Error types for form building and rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field


class FormError(Exception):
    """Base exception for all admin_forms errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class FormBuildError(FormError):
    """
    Raised when a form description cannot be compiled into a tree.

    Examples:
    - Grouping declared without a body
    - has_many declared without a child field builder
    - Empty field name
    - Unknown option keys
    """

    pass


class FieldLookupError(FormError):
    """
    Raised at render time when the schema adapter cannot resolve a field.

    Examples:
    - Field name not defined on the model
    - Unknown model name
    """

    pass


class TemporalValueError(FormError, ValueError):
    """Raised when a stored date/time value has an unrecognized shape."""

    pass


class ConfigError(FormError):
    """Raised when a forms configuration file cannot be loaded."""

    pass


@dataclass
class ErrorContext:
    """
    Location of an error inside a form description.

    Attributes:
        resource: Resource (model) the form describes
        path: Declaration path from the top-level form to the failing node
    """

    resource: str
    path: list[str] = field(default_factory=list)

    def format(self) -> str:
        """
        Format the location as a human-readable string.

        Returns:
            Formatted string like: "form contact > inputs 'Details' > input email"
        """
        return " > ".join([f"form {self.resource}", *self.path])


def make_build_error(message: str, resource: str, path: list[str] | None = None) -> FormBuildError:
    """Helper to create a FormBuildError with its declaration path attached."""
    return FormBuildError(message, ErrorContext(resource=resource, path=list(path or [])))
