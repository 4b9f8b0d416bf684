"""
admin_forms - declarative forms for admin CRUD pages.

Describe a form once as an ordered list of declarations, compile it into a
FormTree, and render the tree against a record, submitted params and
validation errors.
"""

from __future__ import annotations

from ._version import __version__
from .converters.form_builder import FormDescription, build_form_tree, default_form_tree
from .core.errors import (
    ConfigError,
    FieldLookupError,
    FormBuildError,
    FormError,
    TemporalValueError,
)
from .runtime.config import FormsConfig, load_forms_config
from .runtime.form_renderer import FormRenderer, RenderedForm, render_form
from .specs.context import FormMode, NestedPath, RenderContext
from .specs.description import (
    actions,
    collection_inputs,
    content,
    has_many,
    input_,
    inputs,
    javascript,
    text,
)
from .specs.nodes import ChangeDirective, FormTree
from .specs.schema import AssociationInfo, Cardinality, FieldSpec, ModelSchema, ModelSpec

__all__ = [
    "__version__",
    # Building
    "FormDescription",
    "FormTree",
    "build_form_tree",
    "default_form_tree",
    "actions",
    "collection_inputs",
    "content",
    "has_many",
    "input_",
    "inputs",
    "javascript",
    "text",
    "ChangeDirective",
    # Rendering
    "FormMode",
    "FormRenderer",
    "FormsConfig",
    "NestedPath",
    "RenderContext",
    "RenderedForm",
    "load_forms_config",
    "render_form",
    # Schema
    "AssociationInfo",
    "Cardinality",
    "FieldSpec",
    "ModelSchema",
    "ModelSpec",
    # Errors
    "ConfigError",
    "FieldLookupError",
    "FormBuildError",
    "FormError",
    "TemporalValueError",
]
