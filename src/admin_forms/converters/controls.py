"""
Control dispatcher - maps field types to control renderers.

Dispatch is a lookup over ControlKind: ``SCALAR_CONTROLS`` maps each
ScalarType to a kind, with ``DEFAULT_CONTROL`` as the explicit fallback,
and ``ControlDispatcher`` maps each kind to one rendering method. Every
control is followed by its bound error markup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from admin_forms.converters.temporal import SelectOption, TemporalKind, build_temporal_controls
from admin_forms.specs.context import ControlDescriptor
from admin_forms.specs.nodes import CollectionStyle, FieldOptions
from admin_forms.specs.schema import ScalarType, read_attribute

if TYPE_CHECKING:
    from admin_forms.runtime.config import FormsConfig
    from admin_forms.runtime.template_renderer import FormTheme

logger = logging.getLogger(__name__)


class ControlKind(str, Enum):
    """Concrete control rendering strategies."""

    SELECT = "select"
    COLLECTION = "collection"
    BOOLEAN = "boolean"
    TEXTAREA = "textarea"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FILE = "file"
    TEXT = "text"


SCALAR_CONTROLS: dict[ScalarType, ControlKind] = {
    ScalarType.BOOLEAN: ControlKind.BOOLEAN,
    ScalarType.TEXT: ControlKind.TEXTAREA,
    ScalarType.DATE: ControlKind.DATE,
    ScalarType.TIME: ControlKind.TIME,
    ScalarType.DATETIME: ControlKind.DATETIME,
    ScalarType.FILE: ControlKind.FILE,
}

DEFAULT_CONTROL = ControlKind.TEXT

# ``type`` option values that select a control kind instead of an input type
KIND_OVERRIDES: dict[str, ControlKind] = {
    "textarea": ControlKind.TEXTAREA,
    "boolean": ControlKind.BOOLEAN,
    "checkbox": ControlKind.BOOLEAN,
    "date": ControlKind.DATE,
    "time": ControlKind.TIME,
    "datetime": ControlKind.DATETIME,
    "file": ControlKind.FILE,
}

_TEMPORAL_KINDS = {
    ControlKind.DATE: TemporalKind.DATE,
    ControlKind.TIME: TemporalKind.TIME,
    ControlKind.DATETIME: TemporalKind.DATETIME,
}

_SCALAR_ITEM_TYPES = (str, int, float, Decimal, bool)

_CHECKED_VALUES = {"true", "1", "on", "checked", "yes"}


def resolve_control_kind(
    scalar_type: ScalarType,
    options: FieldOptions,
    *,
    has_collection: bool = False,
) -> ControlKind:
    """
    Pick the control kind for a field.

    Priority: collection option, ``type`` override naming a kind, then the
    scalar type table, then the default text control.
    """
    if has_collection:
        return ControlKind.SELECT
    if options.type and options.type in KIND_OVERRIDES:
        return KIND_OVERRIDES[options.type]
    return SCALAR_CONTROLS.get(scalar_type, DEFAULT_CONTROL)


def is_literal_collection(items: Sequence[Any]) -> bool:
    """True when every item is a bare value or a 2-element (value, label) pair."""
    if not items:
        return False
    return all(
        isinstance(item, _SCALAR_ITEM_TYPES)
        or (isinstance(item, (tuple, list)) and len(item) == 2)
        for item in items
    )


def literal_option(item: Any) -> tuple[str, str]:
    """Value and label of a bare value or a (value, label) pair."""
    if isinstance(item, (tuple, list)):
        value, label = item
    else:
        value, label = item, item
    return str(value), str(label)


def is_checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() in _CHECKED_VALUES
    return bool(value)


def display_text(value: Any) -> str | None:
    """Value as it appears in an input's ``value`` attribute."""
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def file_name(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(read_attribute(value, "filename", "") or "")


def item_label(item: Any, fields: Sequence[str] | None) -> str:
    """Display text of a collection member: ``fields`` joined, default ``name``."""
    names = fields or ("name",)
    parts = [read_attribute(item, f) for f in names]
    return " ".join(str(p) for p in parts if p is not None)


def _attrs(defaults: dict[str, Any], html_opts: Mapping[str, Any]) -> dict[str, Any]:
    attrs = dict(defaults)
    attrs.update(html_opts)
    return attrs


class ControlDispatcher:
    """Renders the control for a ControlDescriptor through a theme."""

    def __init__(self, theme: FormTheme, config: FormsConfig) -> None:
        self.theme = theme
        self.config = config
        self._renderers: dict[ControlKind, Callable[..., Markup]] = {
            ControlKind.BOOLEAN: self.render_boolean,
            ControlKind.TEXTAREA: self.render_textarea,
            ControlKind.DATE: self.render_temporal,
            ControlKind.TIME: self.render_temporal,
            ControlKind.DATETIME: self.render_temporal,
            ControlKind.FILE: self.render_file,
            ControlKind.TEXT: self.render_text,
        }

    def render(
        self,
        kind: ControlKind,
        desc: ControlDescriptor,
        options: FieldOptions,
        *,
        today: date,
    ) -> Markup:
        """Render a scalar control followed by its errors."""
        renderer = self._renderers.get(kind, self.render_text)
        logger.debug("Rendering %s as %s", desc.id, kind.value)
        if kind in _TEMPORAL_KINDS:
            body = renderer(desc, options, kind=kind, today=today)
        else:
            body = renderer(desc, options)
        return body + self.render_errors(desc.errors)

    def render_errors(self, errors: list[Any] | None) -> Markup:
        if not errors:
            return Markup("")
        return self.theme.render("controls/errors.html", errors=errors)

    # -- scalar controls ----------------------------------------------------

    def render_boolean(self, desc: ControlDescriptor, options: FieldOptions) -> Markup:
        attrs = _attrs(
            {
                "type": "checkbox",
                "id": desc.id,
                "name": desc.name,
                "value": "true",
                "checked": "checked" if is_checked(desc.value) else None,
            },
            options.html_opts,
        )
        return self.theme.render("controls/checkbox.html", attrs=attrs)

    def render_textarea(self, desc: ControlDescriptor, options: FieldOptions) -> Markup:
        attrs = _attrs(
            {
                "id": desc.id,
                "name": desc.name,
                "placeholder": options.prompt,
            },
            options.html_opts,
        )
        attrs["class"] = "form-control"
        return self.theme.render(
            "controls/textarea.html", attrs=attrs, value=display_text(desc.value)
        )

    def render_temporal(
        self,
        desc: ControlDescriptor,
        options: FieldOptions,
        *,
        kind: ControlKind,
        today: date,
    ) -> Markup:
        controls = build_temporal_controls(
            _TEMPORAL_KINDS[kind],
            desc.value,
            parent_id=desc.id,
            parent_name=desc.name,
            options=options.options,
            today=today,
            year_span=self.config.year_span,
        )
        return self.theme.render("controls/datetime.html", controls=controls)

    def render_file(self, desc: ControlDescriptor, options: FieldOptions) -> Markup:
        attrs = _attrs(
            {
                "type": "file",
                "id": desc.id,
                "name": desc.name,
                "value": file_name(desc.value),
            },
            options.html_opts,
        )
        attrs["class"] = "form-control"
        return self.theme.render("controls/input.html", attrs=attrs)

    def render_text(self, desc: ControlDescriptor, options: FieldOptions) -> Markup:
        input_type = options.type if options.type and options.type not in KIND_OVERRIDES else "text"
        attrs = _attrs(
            {
                "type": input_type,
                "id": desc.id,
                "name": desc.name,
                "value": display_text(desc.value),
                "maxlength": str(self.config.text_maxlength),
                "placeholder": options.prompt,
            },
            options.html_opts,
        )
        attrs["class"] = "form-control"
        return self.theme.render("controls/input.html", attrs=attrs)

    # -- association controls -------------------------------------------------

    def render_literal_select(
        self,
        desc: ControlDescriptor,
        items: Sequence[Any],
        options: FieldOptions,
    ) -> Markup:
        """A select over bare values or (value, label) pairs."""
        current = display_text(desc.value)
        select_options = []
        for item in items:
            value, label = literal_option(item)
            select_options.append(
                SelectOption(
                    label=label,
                    value=value,
                    selected=current is not None and value == current,
                )
            )
        return self._select(desc, select_options, options)

    def render_collection_select(
        self,
        desc: ControlDescriptor,
        items: Sequence[Any],
        options: FieldOptions,
        identity: Callable[[Any], Any],
    ) -> Markup:
        """A select over records: label from ``fields``, value from identity."""
        current = display_text(desc.value)
        select_options = [
            SelectOption(
                label=item_label(item, options.fields),
                value=str(identity(item)),
                selected=current is not None and str(identity(item)) == current,
            )
            for item in items
        ]
        return self._select(desc, select_options, options)

    def _select(
        self,
        desc: ControlDescriptor,
        select_options: list[SelectOption],
        options: FieldOptions,
    ) -> Markup:
        attrs = _attrs({"id": desc.id, "name": desc.name}, options.html_opts)
        attrs["class"] = "form-control"
        body = self.theme.render(
            "controls/select.html",
            attrs=attrs,
            options=select_options,
            prompt=options.prompt,
        )
        return body + self.render_errors(desc.errors)

    def render_many(
        self,
        desc: ControlDescriptor,
        items: Sequence[Any],
        options: FieldOptions,
        identity: Callable[[Any], Any],
        selected_ids: Sequence[Any],
    ) -> Markup:
        """
        A many-association as multi-select, check boxes or radio buttons.

        ``desc.name`` is the ``[]``-suffixed list name; check boxes are named
        per identity so unchecked boxes drop out of the submission.
        """
        style = options.as_ or CollectionStyle.SELECT
        selected = {str(i) for i in selected_ids}
        base_name = desc.name[:-2] if desc.name.endswith("[]") else desc.name
        literal = is_literal_collection(items)
        rendered = []
        for item in items:
            if literal:
                value, label = literal_option(item)
            else:
                value, label = str(identity(item)), item_label(item, options.fields)
            rendered.append(
                {
                    "id": f"{desc.id}_{value}",
                    "name": f"{base_name}[{value}]"
                    if style == CollectionStyle.CHECK_BOXES
                    else desc.name,
                    "value": value,
                    "label": label,
                    "selected": value in selected,
                }
            )
        body = self.theme.render(
            "controls/collection.html",
            id=desc.id,
            name=desc.name,
            style=style.value,
            options=rendered,
        )
        return body + self.render_errors(desc.errors)
