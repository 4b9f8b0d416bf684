"""
TOML form files.

A form file bundles everything needed to render one form outside a web
application: the schema, the form description, and the request state.

    [[models]]
    name = "contact"
    fields = [{ name = "id", type = "id" }, { name = "email" }]

    [form]
    resource = "contact"

    [[form.items]]
    kind = "inputs"
    label = "Details"
    items = [{ kind = "input", field = "email", options = { prompt = "you@example.com" } }]

    [record]
    id = 1
    email = "ada@example.com"

    [errors]
    email = ["unique"]

A file without ``[[form.items]]`` has no description and is rendered with
the default form; ``[collections]`` then lists the related records offered
by its association selects, keyed by model name.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from admin_forms.core.errors import FormBuildError
from admin_forms.specs.context import FormMode, RenderContext
from admin_forms.specs.description import (
    actions,
    collection_inputs,
    content,
    has_many,
    input_,
    inputs,
    javascript,
    text,
)
from admin_forms.specs.schema import ModelSchema, ModelSpec

logger = logging.getLogger(__name__)


class FormFile(BaseModel):
    """Parsed contents of a TOML form file."""

    resource: str
    declarations: list[Any] | None = None
    models: list[ModelSpec] = Field(default_factory=list)
    record: dict[str, Any] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[Any]] | None = None
    required: list[str] = Field(default_factory=list)
    mode: FormMode = FormMode.NEW
    collections: dict[str, list[Any]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def build_schema(self) -> ModelSchema:
        return ModelSchema(self.models)

    def related_records(self, model: str) -> list[Any]:
        """Records of ``model`` listed under ``[collections]``."""
        return self.collections.get(model, [])

    def build_context(self) -> RenderContext:
        return RenderContext(
            record=self.record,
            model_name=self.resource,
            params=self.params,
            errors=self.errors,
            required=frozenset(self.required),
            mode=self.mode,
        )


def _error_value(value: Any) -> Any:
    """TOML has no tuples: ``["too_short", 8]`` becomes ``("too_short", 8)``."""
    if isinstance(value, list) and len(value) == 2:
        return tuple(value)
    return value


def _declaration(item: Any, path: str) -> Any:
    if not isinstance(item, dict) or "kind" not in item:
        raise FormBuildError(f"{path}: each item needs a 'kind'")

    kind = item["kind"]
    options = dict(item.get("options", {}))

    if kind == "input":
        return input_(item.get("field", ""), **options)
    if kind == "inputs":
        body = item.get("items")
        return inputs(
            item.get("label", ""),
            load_declarations(body, f"{path}.items") if body is not None else None,
            **options,
        )
    if kind == "collection_inputs":
        return collection_inputs(item.get("field", ""), options.pop("collection", None), **options)
    if kind == "has_many":
        body = item.get("items")
        if body is None:
            return has_many(item.get("field", ""), None, **options)
        children = load_declarations(body, f"{path}.items")
        return has_many(item.get("field", ""), lambda _record: children, **options)
    if kind == "actions":
        body = item.get("items")
        return actions(load_declarations(body, f"{path}.items") if body is not None else None)
    if kind == "content":
        return content(item.get("content", ""))
    if kind == "text":
        return text(item.get("content", ""))
    if kind == "javascript":
        return javascript(item.get("script", ""))

    raise FormBuildError(f"{path}: unknown kind '{kind}'")


def load_declarations(items: list[Any], path: str = "form.items") -> list[Any]:
    """Convert TOML item tables into declarations."""
    if not isinstance(items, list):
        raise FormBuildError(f"{path}: expected an array of tables")
    return [_declaration(item, f"{path}[{i}]") for i, item in enumerate(items)]


def load_form_file(path: Path) -> FormFile:
    """
    Load a TOML form file.

    Raises:
        FormBuildError: invalid TOML, missing ``[form]`` table or bad items.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise FormBuildError(f"Invalid TOML in {path}: {e}") from e

    form = data.get("form")
    if not isinstance(form, dict) or "resource" not in form:
        raise FormBuildError(f"{path}: missing [form] table with a resource")

    errors = data.get("errors")
    if errors is not None:
        errors = {
            key: [_error_value(v) for v in (value if isinstance(value, list) else [value])]
            for key, value in errors.items()
        }

    try:
        loaded = FormFile(
            resource=form["resource"],
            declarations=load_declarations(form["items"]) if "items" in form else None,
            models=data.get("models", []),
            record=data.get("record", {}),
            params=data.get("params", {}),
            errors=errors,
            required=form.get("required", []),
            mode=form.get("mode", FormMode.NEW),
            collections=data.get("collections", {}),
        )
    except ValidationError as e:
        raise FormBuildError(f"{path}: {e}") from e

    logger.debug("Loaded form file %s (%d items)", path, len(loaded.declarations or []))
    return loaded
