"""
Form specification types.

- nodes: compiled FormNode tree and field options
- description: declaration vocabulary for form descriptions
- schema: schema adapter protocol and in-memory implementation
- context: render context, field scopes and control descriptors
"""

from .context import ControlDescriptor, FieldScope, FormMode, NestedPath, RenderContext
from .description import (
    ActionsDecl,
    CollectionInputsDecl,
    ContentDecl,
    Declaration,
    HasManyDecl,
    InputDecl,
    InputsDecl,
    ScriptDecl,
    actions,
    collection_inputs,
    content,
    has_many,
    input_,
    inputs,
    javascript,
    text,
)
from .nodes import (
    ActionsNode,
    ChangeDirective,
    CollectionStyle,
    ContentNode,
    FieldOptions,
    FieldsetNode,
    FormNode,
    FormTree,
    HasManyNode,
    InputNode,
    LiteralCollection,
    ResolverCollection,
    ScriptNode,
)
from .schema import (
    AssociationInfo,
    Cardinality,
    FieldSpec,
    ModelSchema,
    ModelSpec,
    ScalarType,
    SchemaAdapter,
)

__all__ = [
    # Nodes
    "ActionsNode",
    "ChangeDirective",
    "CollectionStyle",
    "ContentNode",
    "FieldOptions",
    "FieldsetNode",
    "FormNode",
    "FormTree",
    "HasManyNode",
    "InputNode",
    "LiteralCollection",
    "ResolverCollection",
    "ScriptNode",
    # Description
    "ActionsDecl",
    "CollectionInputsDecl",
    "ContentDecl",
    "Declaration",
    "HasManyDecl",
    "InputDecl",
    "InputsDecl",
    "ScriptDecl",
    "actions",
    "collection_inputs",
    "content",
    "has_many",
    "input_",
    "inputs",
    "javascript",
    "text",
    # Schema
    "AssociationInfo",
    "Cardinality",
    "FieldSpec",
    "ModelSchema",
    "ModelSpec",
    "ScalarType",
    "SchemaAdapter",
    # Context
    "ControlDescriptor",
    "FieldScope",
    "FormMode",
    "NestedPath",
    "RenderContext",
]
