"""
Dynamic behaviour aggregation.

Per-control ``change`` options are collected during a render and emitted as
one ready-time script. Literal scripts pass through unchanged; a
ChangeDirective expands into a dependent-reload fetch against
``{base_route}/{plural(field)}/{value}/{plural(update)}``.
"""

from __future__ import annotations

import logging
from typing import Any

from admin_forms.core.strings import pluralize
from admin_forms.specs.nodes import ChangeDirective

logger = logging.getLogger(__name__)


def extra_javascript(model_name: str, param: str, attr: str) -> tuple[str, str]:
    """Script reading the extra parameter and the query-string fragment using it."""
    return (
        f"var extra = $('#{model_name}_{attr}').val();\n",
        f"&{param}='+extra+'",
    )


def directive_script(
    directive: ChangeDirective,
    *,
    model_name: str,
    field_name: str,
    base_route: str,
) -> str | None:
    """
    Expand a dependent-reload directive into script.

    Returns None when the directive has no ``update`` target.
    """
    if not directive.update:
        logger.debug("Ignoring change directive on %s.%s without update", model_name, field_name)
        return None

    update = directive.update
    params = directive.params
    if isinstance(params, str):
        extra, param_str = extra_javascript(model_name, params, params)
    elif isinstance(params, tuple):
        extra, param_str = extra_javascript(model_name, params[0], params[1])
    else:
        extra, param_str = "", ""

    control_id = f"{model_name}_{update}_input"
    route = base_route.rstrip("/")
    return (
        f"$('#{control_id}').show();\n"
        + extra
        + f"$.get('{route}/{pluralize(field_name)}/'+$(this).val()+'/{pluralize(update)}"
        f"/?field_name={update}{param_str}&format=js');\n"
    )


class BehaviorAggregator:
    """Collects change behaviours for one render call."""

    def __init__(self, model_name: str, base_route: str = "/admin") -> None:
        self.model_name = model_name
        self.base_route = base_route
        self._entries: list[tuple[str, str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, control_id: str, field_name: str, change: Any) -> None:
        """Register the change behaviour declared for one control."""
        if change is None:
            return
        if isinstance(change, str):
            script: str | None = change
        elif isinstance(change, ChangeDirective):
            script = directive_script(
                change,
                model_name=self.model_name,
                field_name=field_name,
                base_route=self.base_route,
            )
        else:
            logger.warning("Unsupported change behaviour on %s: %r", control_id, change)
            script = None
        if script:
            self._entries.append((control_id, script))

    def script(self) -> str:
        """One ready-time script with a change listener per control, or ``""``."""
        if not self._entries:
            return ""
        body = "".join(
            f"$(document).on('change','#{control_id}', function() {{\n  {script}\n}});\n"
            for control_id, script in self._entries
        )
        return "$(function() {\n" + body + "});"
