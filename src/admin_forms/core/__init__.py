"""Core utilities shared by the form builder and renderer."""

from .errors import (
    ConfigError,
    ErrorContext,
    FieldLookupError,
    FormBuildError,
    FormError,
    TemporalValueError,
)

__all__ = [
    "ConfigError",
    "ErrorContext",
    "FieldLookupError",
    "FormBuildError",
    "FormError",
    "TemporalValueError",
]
