"""
Nested collection builder - inline editing of has-many relations.

Existing related records are rendered at dense indices 0..n-1 in accessor
order, each with a hidden identity input. One inert template row follows,
keyed by the ``NEW_{RELATION}_RECORD`` sentinel, which the "Add New"
trigger clones client-side after substituting a real index.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from admin_forms.core.errors import FieldLookupError
from admin_forms.core.strings import singularize
from admin_forms.specs.context import FieldScope
from admin_forms.specs.nodes import HasManyNode
from admin_forms.specs.schema import Cardinality, SchemaAdapter, read_attribute

if TYPE_CHECKING:
    from admin_forms.runtime.template_renderer import FormTheme

logger = logging.getLogger(__name__)

# (record, related model, scope, submitted row values, child declarations) -> markup
RowRenderer = Callable[[Any, str, FieldScope, Mapping[str, Any] | None, Any], Markup]


def new_record_name(relation: str) -> str:
    """
    Sentinel index of the template row.

    Examples:
        >>> new_record_name("phone_numbers")
        'NEW_PHONE_NUMBER_RECORD'
    """
    name = singularize(relation).replace(" ", "_").upper()
    return f"NEW_{name}_RECORD"


def insert_item_script(template_id: str, sentinel: str) -> str:
    """Click handler inserting a copy of the template with a fresh index."""
    return (
        f"var html = $('#{template_id}').html().replace(/{sentinel}/g, new Date().getTime()); "
        "$(this).before(html); return false;"
    )


def row_values(submitted: Any, index: int) -> Mapping[str, Any] | None:
    """Submitted values for one row of ``{relation}_attributes``."""
    if isinstance(submitted, Mapping):
        row = submitted.get(str(index), submitted.get(index))
    elif isinstance(submitted, list) and index < len(submitted):
        row = submitted[index]
    else:
        row = None
    return row if isinstance(row, Mapping) else None


def render_has_many(
    node: HasManyNode,
    *,
    theme: FormTheme,
    adapter: SchemaAdapter,
    model: str,
    record: Any,
    scope: FieldScope,
    values: Mapping[str, Any] | None,
    render_row: RowRenderer,
) -> Markup:
    """
    Render the has-many block for ``node.field_name`` on ``record``.

    Raises:
        FieldLookupError: the field is not a has-many association of ``model``.
    """
    relation = node.field_name
    assoc = adapter.association(model, relation)
    if assoc is None or assoc.cardinality != Cardinality.MANY:
        raise FieldLookupError(f"'{relation}' is not a has-many association of '{model}'")

    related = assoc.related_model
    submitted = values.get(f"{relation}_attributes") if values else None
    children = list(read_attribute(record, relation) or [])

    rows: list[Markup] = []
    for index, child in enumerate(children):
        row_scope = scope.nested(relation, index)
        body = render_row(
            child, related, row_scope, row_values(submitted, index), node.child_builder(child)
        )
        rows.append(
            theme.render(
                "form/has_many_fieldset.html",
                fieldset_id=row_scope.id_prefix,
                body=body,
                identity=adapter.identity(child),
                identity_name=row_scope.element_name("id"),
                destroy_name=row_scope.element_name("_destroy"),
            )
        )

    sentinel = new_record_name(relation)
    template_scope = scope.nested(relation, sentinel)
    template = theme.render(
        "form/has_many_fieldset.html",
        fieldset_id=template_scope.id_prefix,
        body=render_row(None, related, template_scope, None, node.child_builder(None)),
        identity=None,
    )
    template_id = f"{template_scope.id_prefix}_template"

    logger.debug("Rendered %d %s rows for %s", len(rows), relation, scope.id_prefix)
    return theme.render(
        "form/has_many.html",
        relation=relation,
        human_label=singularize(relation),
        rows=Markup("\n").join(rows),
        template=template,
        template_id=template_id,
        onclick=insert_item_script(template_id, sentinel),
    )
