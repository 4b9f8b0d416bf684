"""
Validation error binding.

Selects the errors that belong to one field and turns error codes into
sentences. Errors are data: nothing here raises for an unknown error shape.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from admin_forms.core.strings import humanize
from admin_forms.specs.schema import SchemaAdapter, storage_key

ERROR_MESSAGES: dict[str, str] = {
    "unique": "has already been taken",
    "invalid": "has to be valid",
    "format": "has incorrect format",
}


def bind_errors(errors: Sequence[tuple[str, Any]] | None, key: str) -> list[Any] | None:
    """
    Return the errors recorded against exactly ``key``.

    Returns None when no error information is available at all, and an
    empty list when there is information but nothing for this key.
    """
    if errors is None:
        return None
    return [error for error_key, error in errors if error_key == key]


def error_key(adapter: SchemaAdapter, model: str, field_name: str) -> str:
    """Key under which errors for ``field_name`` are recorded."""
    return storage_key(adapter, model, field_name)


def error_message(error: Any) -> str:
    """
    Translate one error into a sentence.

    Examples:
        >>> error_message("unique")
        'has already been taken'
        >>> error_message(("too_short", 8))
        'must be longer than 7'
        >>> error_message(("must be at least %{count} characters", {"count": 3}))
        'must be at least 3 characters'
    """
    if isinstance(error, str):
        return ERROR_MESSAGES.get(error, error)

    if isinstance(error, tuple) and len(error) == 2:
        code, arg = error
        if code == "too_short" and isinstance(arg, int):
            return f"must be longer than {arg - 1}"
        if code == "must_match":
            return f"must match {humanize(str(arg))}"
        if isinstance(code, str) and isinstance(arg, Mapping):
            count = arg.get("count")
            count = count if isinstance(count, int) else 0
            return code.replace("%{count}", str(count))

    return f"error: {error!r}"


def error_messages(errors: list[Any] | None) -> list[str]:
    if not errors:
        return []
    return [error_message(e) for e in errors]
