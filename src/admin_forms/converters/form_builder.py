"""
Form tree builder - compiles form descriptions into FormTree values.

Each grouping scope is evaluated by a function that returns its completed,
ordered tuple of child nodes; nothing outside the scope is mutated. The
fluent ``FormDescription`` builder keeps an explicit stack of accumulators
for the ``with`` block style and hands the finished declarations to the
same compiler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from admin_forms.core.errors import FormBuildError, make_build_error
from admin_forms.specs.description import (
    ActionsDecl,
    CollectionInputsDecl,
    ContentDecl,
    HasManyDecl,
    InputDecl,
    InputsDecl,
    ScriptDecl,
    actions,
    collection_inputs,
    content,
    has_many,
    input_,
    javascript,
    text,
)
from admin_forms.specs.nodes import (
    ActionsNode,
    ContentNode,
    FieldOptions,
    FieldsetNode,
    FormTree,
    HasManyNode,
    InputNode,
    ScriptNode,
)
from admin_forms.specs.schema import Cardinality, SchemaAdapter

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_FIELDS = ("id", "inserted_at", "updated_at")


def build_form_tree(description: Sequence[Any] | None, resource: str) -> FormTree:
    """
    Compile a form description into an ordered FormTree.

    Field names are not checked here; unknown fields fail at render time
    when the schema adapter is consulted.

    Raises:
        FormBuildError: the description is structurally malformed.
    """
    if description is None:
        raise make_build_error("form has no body", resource)

    nodes, script = _evaluate_scope(description, resource, [], top_level=True)
    if script is not None:
        nodes = (*nodes, ScriptNode(script=script))

    logger.debug("Compiled form for %s: %d top-level nodes", resource, len(nodes))
    return FormTree(resource=resource, nodes=nodes)


def compile_declarations(body: Sequence[Any], resource: str) -> tuple[Any, ...]:
    """Compile a nested body (e.g. has_many rows) where scripts are not allowed."""
    nodes, _ = _evaluate_scope(body, resource, [], top_level=False)
    return nodes


def _evaluate_scope(
    body: Sequence[Any],
    resource: str,
    path: list[str],
    *,
    top_level: bool,
) -> tuple[tuple[Any, ...], str | None]:
    """Evaluate one grouping scope, returning its ordered children and script."""
    if isinstance(body, (str, bytes)) or not isinstance(body, Sequence):
        raise make_build_error(
            f"expected a sequence of declarations, got {type(body).__name__}", resource, path
        )

    children: list[Any] = []
    script: str | None = None
    for decl in body:
        if isinstance(decl, ScriptDecl):
            if not top_level:
                raise make_build_error(
                    "javascript is only allowed at the top level of a form", resource, path
                )
            # last declaration wins
            script = decl.script
            continue
        children.append(_evaluate(decl, resource, path))
    return tuple(children), script


def _evaluate(decl: Any, resource: str, path: list[str]) -> Any:
    if isinstance(decl, InputDecl):
        here = [*path, f"input {decl.field_name}"]
        _check_name(decl.field_name, resource, here)
        return InputNode(field_name=decl.field_name, options=_options(decl.options, resource, here))

    if isinstance(decl, CollectionInputsDecl):
        here = [*path, f"inputs {decl.field_name}"]
        _check_name(decl.field_name, resource, here)
        options = _options(decl.options, resource, here)
        if options.collection is None:
            raise make_build_error("collection inputs need a collection", resource, here)
        return InputNode(field_name=decl.field_name, options=options)

    if isinstance(decl, InputsDecl):
        here = [*path, f"inputs {decl.label!r}"]
        if decl.body is None:
            raise make_build_error("inputs block has no body", resource, here)
        nodes, _ = _evaluate_scope(decl.body, resource, here, top_level=False)
        return FieldsetNode(
            label=decl.label, nodes=nodes, options=_options(decl.options, resource, here)
        )

    if isinstance(decl, HasManyDecl):
        here = [*path, f"has_many {decl.field_name}"]
        _check_name(decl.field_name, resource, here)
        if decl.builder is None or not callable(decl.builder):
            raise make_build_error("has_many needs a child field builder", resource, here)
        return HasManyNode(
            field_name=decl.field_name,
            child_builder=decl.builder,
            options=_options(decl.options, resource, here),
        )

    if isinstance(decl, ActionsDecl):
        here = [*path, "actions"]
        if decl.body is None:
            raise make_build_error("actions block has no body", resource, here)
        nodes, _ = _evaluate_scope(decl.body, resource, here, top_level=False)
        return ActionsNode(nodes=nodes)

    if isinstance(decl, ContentDecl):
        return ContentNode(content=decl.content, is_markup=decl.is_markup)

    raise make_build_error(f"unknown declaration {decl!r}", resource, path)


def _check_name(name: str, resource: str, path: list[str]) -> None:
    if not name or not name.strip():
        raise make_build_error("field name must not be empty", resource, path)


def _options(raw: dict[str, Any], resource: str, path: list[str]) -> FieldOptions:
    try:
        return FieldOptions(**raw)
    except ValidationError as e:
        raise make_build_error(f"invalid options: {e}", resource, path) from e


class FormDescription:
    """
    Block-style form description builder.

    Example::

        form = FormDescription("contact")
        with form.inputs("Details") as f:
            f.input("first_name")
            f.input("category", collection=categories)
        with form.inputs("Phone Numbers") as f:
            f.has_many("phone_numbers", lambda p: [input_("label"), input_("number")])
        tree = form.build()
    """

    def __init__(self, resource: str) -> None:
        self.resource = resource
        self._stack: list[list[Any]] = [[]]

    def _push(self, decl: Any) -> FormDescription:
        self._stack[-1].append(decl)
        return self

    def input(self, field_name: str, **options: Any) -> FormDescription:
        return self._push(input_(field_name, **options))

    def collection_inputs(
        self, field_name: str, collection: Any, **options: Any
    ) -> FormDescription:
        return self._push(collection_inputs(field_name, collection, **options))

    def has_many(
        self, field_name: str, builder: Callable[[Any], Any], **options: Any
    ) -> FormDescription:
        return self._push(has_many(field_name, builder, **options))

    def content(self, markup: str) -> FormDescription:
        return self._push(content(markup))

    def text(self, value: str) -> FormDescription:
        return self._push(text(value))

    def javascript(self, script: str) -> FormDescription:
        return self._push(javascript(script))

    @contextmanager
    def inputs(self, label: str = "", **options: Any) -> Iterator[FormDescription]:
        self._stack.append([])
        try:
            yield self
        finally:
            body = self._stack.pop()
        self._push(InputsDecl(label=label, body=tuple(body), options=options))

    @contextmanager
    def actions(self) -> Iterator[FormDescription]:
        self._stack.append([])
        try:
            yield self
        finally:
            body = self._stack.pop()
        self._push(actions(body))

    def declarations(self) -> tuple[Any, ...]:
        if len(self._stack) != 1:
            raise FormBuildError(f"form {self.resource}: unclosed grouping block")
        return tuple(self._stack[0])

    def build(self) -> FormTree:
        return build_form_tree(self.declarations(), self.resource)


def default_form_tree(
    adapter: SchemaAdapter,
    model: str,
    related_loader: Callable[[str], list[Any]] | None = None,
    excluded: Sequence[str] = DEFAULT_EXCLUDED_FIELDS,
) -> FormTree:
    """
    Build the form used when a resource declares no description.

    Every field except ``excluded`` is rendered in one unlabelled fieldset.
    A belongs-to foreign key (``category_id``) is replaced by its association
    with a collection from ``related_loader``; without a loader it is left out.
    """
    body: list[Any] = []
    for name in adapter.field_names(model):
        if name in excluded:
            continue
        assoc = adapter.association(model, name[:-3]) if name.endswith("_id") else None
        if assoc is None or assoc.cardinality != Cardinality.ONE or assoc.owner_key != name:
            body.append(input_(name))
        elif related_loader is not None:
            resolver = _loader_resolver(related_loader, assoc.related_model)
            body.append(input_(assoc.name, collection=resolver))
        else:
            logger.debug("Skipping %s.%s: no loader for %s", model, name, assoc.related_model)
    return build_form_tree([InputsDecl(label="", body=tuple(body))], model)


def _loader_resolver(
    loader: Callable[[str], list[Any]], related_model: str
) -> Callable[[Any, Any], list[Any]]:
    def resolve(_context: Any, _record: Any) -> list[Any]:
        return loader(related_model)

    return resolve
