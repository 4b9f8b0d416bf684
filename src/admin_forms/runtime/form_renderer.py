"""
Node renderer - walks a FormTree and produces markup.

For each node kind the renderer combines the control dispatcher, the
composite temporal builder, the nested collection builder, the error
binder and the behaviour aggregator. Lookup failures (unknown fields,
unrecognised stored date/time shapes) propagate to the caller; no partial
markup is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from markupsafe import Markup, escape

from admin_forms.converters.behaviors import BehaviorAggregator
from admin_forms.converters.controls import (
    ControlDispatcher,
    is_literal_collection,
    resolve_control_kind,
)
from admin_forms.converters.error_binder import bind_errors, error_key
from admin_forms.converters.form_builder import compile_declarations
from admin_forms.converters.nested import render_has_many
from admin_forms.core.strings import humanize, singularize
from admin_forms.runtime.config import FormsConfig
from admin_forms.runtime.template_renderer import FormTheme, JinjaTheme
from admin_forms.specs.context import (
    ControlDescriptor,
    FieldScope,
    FormMode,
    NestedPath,
    RenderContext,
)
from admin_forms.specs.nodes import (
    ActionsNode,
    Collection,
    ContentNode,
    FieldOptions,
    FieldsetNode,
    FormTree,
    HasManyNode,
    InputNode,
    LiteralCollection,
    ScriptNode,
)
from admin_forms.specs.schema import (
    Cardinality,
    SchemaAdapter,
    normalize_scalar_type,
    read_attribute,
    storage_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedForm:
    """Output of one render call."""

    markup: Markup
    script: str


@dataclass(frozen=True)
class _Frame:
    """The record whose controls are being rendered and where they are named."""

    model: str
    record: Any
    scope: FieldScope
    values: Mapping[str, Any] | None
    bind_errors: bool = True

    def value(self, key: str) -> Any:
        if self.values is not None and key in self.values:
            return self.values[key]
        return read_attribute(self.record, key)


class FormRenderer:
    """
    Renders compiled form trees.

    Args:
        adapter: Schema metadata for the rendered models
        theme: Template capability; defaults to the built-in Jinja2 theme
        config: Rendering configuration
    """

    def __init__(
        self,
        adapter: SchemaAdapter,
        theme: FormTheme | None = None,
        config: FormsConfig | None = None,
    ) -> None:
        self.adapter = adapter
        self.config = config or FormsConfig()
        self.theme = theme or JinjaTheme(project_templates_dir=self.config.templates_dir)
        self.controls = ControlDispatcher(self.theme, self.config)

    # -- entry points ---------------------------------------------------------

    def render(self, tree: FormTree, context: RenderContext) -> RenderedForm:
        """Render ``tree`` for ``context`` into markup and the aggregated script."""
        aggregator = BehaviorAggregator(context.model_name, self.config.base_route)
        frame = _Frame(
            model=context.model_name,
            record=context.record,
            scope=FieldScope.for_model(context.model_name),
            values=context.model_params,
        )
        body = self._render_nodes(tree.nodes, context, frame, aggregator)
        markup = self.theme.render(
            "form/form.html",
            body=body,
            csrf_token=context.csrf_token,
            method_put=context.mode == FormMode.EDIT,
        )
        logger.debug("Rendered form for %s (%d behaviours)", context.model_name, len(aggregator))
        return RenderedForm(markup=markup, script=aggregator.script())

    def render_ajax_field(
        self,
        field_name: str,
        collection: Sequence[Any],
        context: RenderContext,
        *,
        nested: NestedPath | None = None,
        options: FieldOptions | None = None,
    ) -> Markup:
        """
        Re-render one association control for in-place replacement.

        ``nested`` places the control inside a has-many row
        (``{model}[{relation}_attributes][{index}][{field}]``).
        """
        frame = _Frame(
            model=context.model_name,
            record=context.record,
            scope=FieldScope.for_model(context.model_name),
            values=context.model_params,
        )
        if nested is not None:
            assoc = self.adapter.association(context.model_name, nested.relation)
            related = assoc.related_model if assoc is not None else nested.relation
            submitted = context.model_params.get(f"{nested.relation}_attributes")
            row = submitted.get(str(nested.index)) if isinstance(submitted, Mapping) else None
            frame = _Frame(
                model=related,
                record=None,
                scope=frame.scope.nested(nested.relation, nested.index),
                values=row if isinstance(row, Mapping) else None,
                bind_errors=False,
            )
        base = options or FieldOptions()
        node_options = base.model_copy(
            update={"collection": LiteralCollection(items=tuple(collection))}
        )
        _, body = self._association_control(field_name, node_options, context, frame)
        return body

    # -- node walk ------------------------------------------------------------

    def _render_nodes(
        self,
        nodes: Sequence[Any],
        context: RenderContext,
        frame: _Frame,
        aggregator: BehaviorAggregator,
    ) -> Markup:
        parts = [self._render_node(node, context, frame, aggregator) for node in nodes]
        return Markup("\n").join(parts)

    def _render_node(
        self,
        node: Any,
        context: RenderContext,
        frame: _Frame,
        aggregator: BehaviorAggregator,
    ) -> Markup:
        if isinstance(node, InputNode):
            return self._render_input(node, context, frame, aggregator)
        if isinstance(node, FieldsetNode):
            return self.theme.render(
                "form/fieldset.html",
                legend=node.options.label or node.label,
                body=self._render_nodes(node.nodes, context, frame, aggregator),
                visible=node.options.display or context.is_editing,
            )
        if isinstance(node, HasManyNode):
            return self._render_has_many(node, context, frame, aggregator)
        if isinstance(node, ActionsNode):
            return self.theme.render(
                "form/actions.html",
                body=self._render_nodes(node.nodes, context, frame, aggregator),
            )
        if isinstance(node, ContentNode):
            return Markup(node.content) if node.is_markup else escape(node.content)
        if isinstance(node, ScriptNode):
            return self.theme.render("form/script.html", script=Markup(node.script))
        raise TypeError(f"Unknown form node {node!r}")

    def _render_has_many(
        self,
        node: HasManyNode,
        context: RenderContext,
        frame: _Frame,
        aggregator: BehaviorAggregator,
    ) -> Markup:
        def render_row(
            record: Any,
            model: str,
            scope: FieldScope,
            values: Mapping[str, Any] | None,
            declarations: Any,
        ) -> Markup:
            nodes = compile_declarations(declarations, model)
            row = _Frame(model=model, record=record, scope=scope, values=values, bind_errors=False)
            # the template row (no record) carries sentinel ids that are never bound
            behaviors = aggregator if record is not None else BehaviorAggregator(model)
            return self._render_nodes(nodes, context, row, behaviors)

        return render_has_many(
            node,
            theme=self.theme,
            adapter=self.adapter,
            model=frame.model,
            record=frame.record,
            scope=frame.scope,
            values=frame.values,
            render_row=render_row,
        )

    def _render_input(
        self,
        node: InputNode,
        context: RenderContext,
        frame: _Frame,
        aggregator: BehaviorAggregator,
    ) -> Markup:
        field_name = node.field_name
        options = node.options

        # fails for unknown fields before anything is emitted
        scalar_type = normalize_scalar_type(self.adapter.field_type(frame.model, field_name))

        if options.collection is not None:
            desc, body = self._association_control(field_name, options, context, frame)
            kind_class = "select"
        else:
            kind = resolve_control_kind(scalar_type, options)
            desc = self._describe(field_name, field_name, options, context, frame)
            body = self.controls.render(kind, desc, options, today=context.today)
            kind_class = kind.value

        aggregator.add(desc.id, field_name, options.change)

        css = [kind_class, "input", "required" if desc.required else "optional"]
        if desc.has_errors:
            css.append("error")
        return self.theme.render(
            "form/item.html",
            css_class=" ".join(css),
            base_id=frame.scope.element_id(field_name),
            control_id=desc.id,
            label=desc.label,
            required=desc.required,
            visible=desc.visible,
            ajax=options.ajax,
            body=body,
        )

    # -- helpers --------------------------------------------------------------

    def _association_control(
        self,
        field_name: str,
        options: FieldOptions,
        context: RenderContext,
        frame: _Frame,
    ) -> tuple[ControlDescriptor, Markup]:
        items = self._resolve_collection(options.collection, context, frame)
        assoc = self.adapter.association(frame.model, field_name)

        if assoc is not None and assoc.cardinality == Cardinality.MANY:
            ids_field = f"{singularize(field_name)}_ids"
            desc = self._describe(field_name, ids_field, options, context, frame)
            desc = desc.model_copy(update={"name": f"{desc.name}[]"})
            body = self.controls.render_many(
                desc,
                items,
                options,
                self.adapter.identity,
                self._selected_ids(field_name, ids_field, frame),
            )
            return desc, body

        key = storage_key(self.adapter, frame.model, field_name)
        desc = self._describe(field_name, key, options, context, frame)
        if is_literal_collection(items):
            body = self.controls.render_literal_select(desc, items, options)
        else:
            body = self.controls.render_collection_select(
                desc, items, options, self.adapter.identity
            )
        return desc, body

    def _resolve_collection(
        self,
        collection: Collection | None,
        context: RenderContext,
        frame: _Frame,
    ) -> list[Any]:
        if collection is None:
            return []
        if isinstance(collection, LiteralCollection):
            return list(collection.items)
        return list(collection.resolve(context, frame.record) or [])

    def _selected_ids(self, field_name: str, ids_field: str, frame: _Frame) -> list[Any]:
        if frame.values is not None and ids_field in frame.values:
            submitted = frame.values[ids_field]
            if isinstance(submitted, Mapping):
                return [k for k, v in submitted.items() if v not in (None, "", "false")]
            if isinstance(submitted, (list, tuple)):
                return [v for v in submitted if v not in (None, "")]
            return [submitted] if submitted else []
        related = read_attribute(frame.record, field_name) or []
        return [self.adapter.identity(r) for r in related]

    def _describe(
        self,
        field_name: str,
        key: str,
        options: FieldOptions,
        context: RenderContext,
        frame: _Frame,
    ) -> ControlDescriptor:
        errors = None
        if frame.bind_errors:
            errors = bind_errors(context.errors, error_key(self.adapter, frame.model, field_name))
        return ControlDescriptor(
            id=frame.scope.element_id(key),
            name=frame.scope.element_name(key),
            value=frame.value(key),
            errors=errors,
            required=key in context.required or field_name in context.required,
            visible=self._is_visible(options, context, frame, key),
            label=self._label(field_name, options),
        )

    @staticmethod
    def _label(field_name: str, options: FieldOptions) -> str | None:
        if options.type == "hidden" or options.label is False:
            return None
        if options.label:
            return options.label
        return humanize(field_name)

    @staticmethod
    def _is_visible(
        options: FieldOptions,
        context: RenderContext,
        frame: _Frame,
        key: str,
    ) -> bool:
        """
        Visibility truth table.

        display true/absent -> visible; display false -> visible only when
        editing (``id`` param) or a value for the field was submitted.
        """
        if options.display:
            return True
        if context.is_editing:
            return True
        return bool(frame.values and frame.values.get(key))


def render_form(
    tree: FormTree,
    context: RenderContext,
    *,
    adapter: SchemaAdapter,
    theme: FormTheme | None = None,
    config: FormsConfig | None = None,
) -> RenderedForm:
    """Render ``tree`` for ``context``; see FormRenderer.render."""
    return FormRenderer(adapter, theme=theme, config=config).render(tree, context)


def escape_javascript(value: str) -> str:
    """Escape a string for embedding in a double- or single-quoted JS literal."""
    return (
        value.replace("\\", "\\\\")
        .replace("</", "<\\/")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
        .replace('"', '\\"')
        .replace("'", "\\'")
    )


def ajax_update_script(model_name: str, field_name: str, markup: str) -> str:
    """jQuery snippet replacing ``#{model}_{field}-update`` with ``markup``."""
    return f"$('#{model_name}_{field_name}-update').html(\"{escape_javascript(str(markup))}\");"
