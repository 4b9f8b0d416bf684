"""
Jinja2 theme for form rendering.

A theme is the capability object the renderer draws markup through. It is
passed into each render call rather than looked up globally, so renders
stay independent. ``JinjaTheme`` loads templates from the package's
templates/ directory, with optional project-level overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PrefixLoader, select_autoescape
from markupsafe import Markup

from admin_forms.converters.error_binder import error_message, error_messages
from admin_forms.core.strings import humanize

# Template directory
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


@runtime_checkable
class FormTheme(Protocol):
    """Renders named templates into markup."""

    def render(self, template_name: str, **context: Any) -> Markup:
        """Render ``template_name`` with ``context``."""
        ...


def _error_message_filter(value: Any) -> str:
    return error_message(value)


def _humanize_filter(value: Any) -> str:
    if value is None:
        return ""
    return humanize(str(value))


def create_jinja_env(project_templates_dir: Path | None = None) -> Environment:
    """Create and configure the Jinja2 environment.

    Args:
        project_templates_dir: Optional path to project-level templates.
            When provided, project templates take priority over framework
            templates. Framework originals remain accessible via the
            ``af://`` prefix (e.g. ``{% extends "af://form/item.html" %}``).
    """
    framework_loader = FileSystemLoader(str(TEMPLATES_DIR))

    if project_templates_dir and project_templates_dir.is_dir():
        project_loader = FileSystemLoader(str(project_templates_dir))
        # Project templates searched first, framework as fallback
        main_loader = ChoiceLoader([project_loader, framework_loader])
    else:
        main_loader = ChoiceLoader([framework_loader])

    loader = PrefixLoader({"af": framework_loader}, delimiter="://")
    combined = ChoiceLoader([loader, main_loader])

    env = Environment(
        loader=combined,
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )

    # Custom filters
    env.filters["error_message"] = _error_message_filter
    env.filters["error_messages"] = error_messages
    env.filters["humanize"] = _humanize_filter

    return env


class JinjaTheme:
    """FormTheme backed by a Jinja2 environment."""

    def __init__(
        self,
        env: Environment | None = None,
        project_templates_dir: Path | None = None,
    ) -> None:
        self.env = env or create_jinja_env(project_templates_dir)

    def render(self, template_name: str, **context: Any) -> Markup:
        template = self.env.get_template(template_name)
        return Markup(template.render(**context))
