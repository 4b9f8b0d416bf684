"""
Rendering runtime: the node renderer, the Jinja2 theme and configuration.
"""

from .config import FormsConfig, load_forms_config
from .form_renderer import (
    FormRenderer,
    RenderedForm,
    ajax_update_script,
    escape_javascript,
    render_form,
)
from .template_renderer import FormTheme, JinjaTheme, create_jinja_env

__all__ = [
    "FormRenderer",
    "FormTheme",
    "FormsConfig",
    "JinjaTheme",
    "RenderedForm",
    "ajax_update_script",
    "create_jinja_env",
    "escape_javascript",
    "load_forms_config",
    "render_form",
]
